"""
截断预处理器

按测试的截断参数丢弃鼠标/键盘事件流首尾的事件, 在覆盖之后执行
"""


from __future__ import annotations

from player_core.logging import get_logger
from player_core.preprocessing.base import BasePreProcessor
from player_core.replay.events import truncate_events
from player_core.schema.models import RecordedTest

logger = get_logger(__name__)


class TruncationsPreProcessor(BasePreProcessor):
    """截断预处理器"""

    name = "truncations"
    priority = 40

    def pre_process(self, test: RecordedTest) -> bool:
        truncations = test.truncations
        mouse_before = len(test.mouse_events)
        kb_before = len(test.keyboard_events)

        test.mouse_events = truncate_events(test.mouse_events, truncations.mouse_start, truncations.mouse_end)
        test.keyboard_events = truncate_events(test.keyboard_events, truncations.kb_start, truncations.kb_end)

        logger.debug(
            f"{test.name} 截断: 鼠标 {mouse_before} -> {len(test.mouse_events)}, "
            f"键盘 {kb_before} -> {len(test.keyboard_events)}"
        )
        return True
