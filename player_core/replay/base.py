"""
回放协作者基类

回放驱动通过这两个接口与外部交互:
- EventSink: 把鼠标/键盘事件注入目标环境
- ScreenChecker: 截图并与录制的截图比较
"""


from __future__ import annotations
from abc import ABC, abstractmethod

from player_core.logging import get_logger
from player_core.schema.models import NS_PER_MS, RecordedTest, ReplayEvent

logger = get_logger(__name__)


class EventSink(ABC):
    """事件注入接口"""

    @abstractmethod
    def post_mouse(self, event: ReplayEvent) -> None:
        """注入鼠标事件 (坐标已经应用偏移)"""
        pass

    @abstractmethod
    def post_keyboard(self, event: ReplayEvent) -> None:
        """注入键盘事件"""
        pass


class ScreenChecker(ABC):
    """截图检查接口"""

    @abstractmethod
    def check(self, test: RecordedTest, event: ReplayEvent) -> bool:
        """截图检查, 返回是否与录制一致"""
        pass


class LoggingEventSink(EventSink):
    """只记录日志的事件注入 (演练模式)"""

    def __init__(self):
        self.posted = 0

    def post_mouse(self, event: ReplayEvent) -> None:
        self.posted += 1
        logger.info(f"[dry-run] 鼠标 {event.sub_type.name} @{event.timestamp // NS_PER_MS}ms {event.payload}")

    def post_keyboard(self, event: ReplayEvent) -> None:
        self.posted += 1
        logger.info(f"[dry-run] 键盘 @{event.timestamp // NS_PER_MS}ms {event.payload}")


class AlwaysPassScreenChecker(ScreenChecker):
    """总是通过的截图检查 (演练模式)"""

    def check(self, test: RecordedTest, event: ReplayEvent) -> bool:
        logger.info(f"[dry-run] 截图检查 {test.name} @{event.timestamp // NS_PER_MS}ms")
        return True
