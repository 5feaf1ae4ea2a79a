"""
覆盖预处理器

用回放器配置替换录制中的部分参数:
- 回放模式: 只能关闭录制中开启的事件类型, 比如不回放鼠标移动
- 时序: 缩短录制中不必要的长时间停顿
- 截断: 忽略录制开头/结尾的无用事件
- 鼠标偏移: 平台变化后整体平移鼠标坐标

覆盖是直接替换字段, 同样的配置重复执行结果不变.
"""


from __future__ import annotations
from functools import partial
from typing import Callable

from player_core.config import OverridesConfig
from player_core.logging import get_logger
from player_core.preprocessing.base import BasePreProcessor
from player_core.schema.models import MouseOffsets, RecordedTest, Timings, Truncations

logger = get_logger(__name__)

OVERRIDE_THRESHOLD = -1
# -1 对最大等待是合法值 (不限制), 所以阈值更低
MAX_WAIT_OVERRIDE_THRESHOLD = -2


def override_timing(
    threshold: int,
    value: int,
    recorded_value: int,
    setter: Callable[[int], None],
    allow_slowdown: bool,
) -> bool:
    """
    覆盖单个时序值

    value 必须大于 threshold. allow_slowdown 为False时, 只有录制值未设置 (负数)
    或新值更小时才覆盖, 不允许覆盖让回放比录制更慢.

    Returns:
        是否应用了覆盖
    """
    if value > threshold and (allow_slowdown or recorded_value < 0 or value < recorded_value):
        logger.debug(f"应用覆盖 {value}")
        setter(value)
        return True
    return False


def override_truncation(threshold: int, value: int, setter: Callable[[int], None]) -> bool:
    """value 大于 threshold 时覆盖截断值"""
    if value > threshold:
        setter(value)
        return True
    return False


class OverridesPreProcessor(BasePreProcessor):
    """覆盖预处理器"""

    name = "overrides"
    priority = 30

    def __init__(self, config: OverridesConfig):
        self.config = config

    def pre_process(self, test: RecordedTest) -> bool:
        reproduction = self.config.reproduction
        if reproduction.enabled and reproduction.mode > 0:
            # 不会开启录制中关闭的事件类型
            test.preferred_play_mode = test.preferred_play_mode & reproduction.mode
            logger.debug(f"{test.name} 回放模式覆盖为 {test.preferred_play_mode}")
        if self.config.timings.enabled:
            self._override_timings(test.timings)
        if self.config.truncations.enabled:
            self._override_truncations(test.truncations)
        if self.config.mouse_offsets.enabled:
            self._override_mouse_offsets(test.mouse_offsets)
        return True

    def _override_timings(self, timings: Timings) -> None:
        new = self.config.timings
        override_timing(MAX_WAIT_OVERRIDE_THRESHOLD, new.max_wait_ns, timings.max_wait_ns,
                        partial(setattr, timings, "max_wait_ns"), False)
        override_timing(OVERRIDE_THRESHOLD, new.min_wait_ns, timings.min_wait_ns,
                        partial(setattr, timings, "min_wait_ns"), True)
        override_timing(OVERRIDE_THRESHOLD, new.min_wait_floor_ms, timings.min_wait_floor_ms,
                        partial(setattr, timings, "min_wait_floor_ms"), True)
        override_timing(OVERRIDE_THRESHOLD, new.sc_delay_ms, timings.sc_delay_ms,
                        partial(setattr, timings, "sc_delay_ms"), True)
        override_timing(OVERRIDE_THRESHOLD, new.start_delay_ms, timings.start_delay_ms,
                        partial(setattr, timings, "start_delay_ms"), True)

    def _override_truncations(self, truncations: Truncations) -> None:
        new = self.config.truncations
        for field in ("mouse_start", "mouse_end", "kb_start", "kb_end"):
            override_truncation(OVERRIDE_THRESHOLD, getattr(new, field), partial(setattr, truncations, field))

    def _override_mouse_offsets(self, mouse_offsets: MouseOffsets) -> None:
        mouse_offsets.x = self.config.mouse_offsets.x
        mouse_offsets.y = self.config.mouse_offsets.y
