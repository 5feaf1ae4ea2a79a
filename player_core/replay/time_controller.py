"""
时间控制器

决定每个录制事件什么时候交给回放驱动:
- 跟踪真实经过时间与录制的相对时间
- 计算两次事件之间需要睡眠多久
- 应用最大等待/最小等待/等待下限等时序策略
- 安全模式下忽略最大等待限制
"""


from __future__ import annotations
import time
from enum import Enum
from threading import Event
from typing import Callable, Optional

from player_core.exceptions import ReplayInterruptedError, ReplayStateError
from player_core.logging import get_logger
from player_core.replay.events import merge_and_filter
from player_core.replay.tweaks import (
    UNUSED_KEY_DESCRIPTION,
    TweakableComponent,
    TweakKey,
    parse_flag,
)
from player_core.schema.models import NS_PER_MS, RecordedTest, ReplayEvent

logger = get_logger(__name__)

TWEAK_DESCRIPTIONS = {
    TweakKey.SAFE: "Disable all time wait shortcuts",
}


class ControllerState(str, Enum):
    """时间控制器状态"""
    UNSTARTED = "unstarted"
    READY = "ready"
    EXHAUSTED = "exhausted"


class TimeController(TweakableComponent):
    """
    时间控制器

    由单个回放线程轮询, 内部不加锁. 只有安全模式开关和中断
    可以从其他线程修改.
    """

    NAME = "advanced"

    def __init__(
        self,
        safe_mode: bool = False,
        clock: Callable[[], int] = time.monotonic_ns,
    ):
        self._clock = clock
        self._safe_mode = Event()
        self._interrupted = Event()
        if safe_mode:
            self._safe_mode.set()

        self._test: Optional[RecordedTest] = None
        self._events: list[ReplayEvent] = []
        self._cursor = 0
        self._last_event_returned = 0
        self._last_event_ts = 0

        self._tweak_setters: dict[TweakKey, Callable[[str], None]] = {
            TweakKey.SAFE: self._set_safe_mode,
        }
        self._tweak_getters: dict[TweakKey, Callable[[], str]] = {
            TweakKey.SAFE: lambda: str(self.safe_mode).lower(),
        }

    @property
    def state(self) -> ControllerState:
        if self._test is None:
            return ControllerState.UNSTARTED
        if self._cursor >= len(self._events):
            return ControllerState.EXHAUSTED
        return ControllerState.READY

    @property
    def safe_mode(self) -> bool:
        return self._safe_mode.is_set()

    @property
    def remaining(self) -> int:
        return len(self._events) - self._cursor

    def start(self, test: RecordedTest) -> None:
        """
        开始一个测试

        构建事件流并重置计时. 对新测试再次调用会完全替换之前的状态,
        只有安全模式会保留.
        """
        self._test = test
        self._events = merge_and_filter(
            test.screen_checks,
            test.mouse_events,
            test.keyboard_events,
            test.preferred_play_mode,
        )
        self._cursor = 0
        self._interrupted.clear()

        self._last_event_returned = self._clock()
        self._last_event_ts = 0
        logger.debug(f"测试 {test.name} 开始回放, 共 {len(self._events)} 个事件")

    def next_event(self) -> Optional[ReplayEvent]:
        """
        获取下一个事件

        必要时先睡眠, 使事件不会早于录制时的相对时间发出.
        事件耗尽时返回None.

        Raises:
            ReplayStateError: 尚未调用start
            ReplayInterruptedError: 等待被中断
        """
        test = self._require_started("next_event")
        # 注入事件期间收到的中断在这里生效, 不等到下一次睡眠
        self._raise_if_interrupted(0)
        if self._cursor >= len(self._events):
            return None

        event = self._events[self._cursor]
        self._cursor += 1

        safe_mode = self.safe_mode
        timings = test.timings

        elapsed = self._clock() - self._last_event_returned
        expected = event.timestamp - self._last_event_ts
        to_wait = expected - elapsed
        if timings.has_ceiling and not safe_mode:
            # 录制中的 max_wait_ns 实际是毫秒
            to_wait = min(to_wait, timings.max_wait_ns * NS_PER_MS)

        if to_wait > timings.min_wait_ns or timings.has_floor:
            # 设置了等待下限时每个事件之间至少等待这么久, 避免目标环境的输入队列被塞满
            if timings.has_floor:
                to_wait = max(to_wait, timings.min_wait_floor_ms * NS_PER_MS)
            logger.debug(f"事件 {event.sub_type.name}@{event.timestamp} 等待 {to_wait // NS_PER_MS}ms")
            self.wait_for(to_wait // NS_PER_MS)

        self._last_event_ts = event.timestamp
        self._last_event_returned = self._clock()
        return event

    def wait_for_start(self) -> None:
        """第一个事件之前等待 start_delay_ms, 之后重新计时"""
        test = self._require_started("wait_for_start")
        self.wait_for(test.timings.start_delay_ms)
        self._last_event_returned = self._clock()

    def wait_for_screen(self) -> None:
        """截图前等待, 等待时间不计入下一个事件的时间差"""
        test = self._require_started("wait_for_screen")
        self.wait_for(test.timings.sc_delay_ms)
        self._last_event_returned = self._clock()

    def wait_for(self, time_ms: int) -> None:
        """
        阻塞等待指定毫秒数

        不睡眠 (time_ms <= 0) 时也会检查是否已被中断.

        Raises:
            ReplayStateError: 尚未调用start
            ReplayInterruptedError: 等待被interrupt()打断
        """
        self._require_started("wait_for")
        if time_ms <= 0:
            self._raise_if_interrupted(time_ms)
            return
        if self._interrupted.wait(time_ms / 1000):
            self._raise_if_interrupted(time_ms)

    def interrupt(self) -> None:
        """中断当前测试: 正在进行的等待立即结束, 否则在下一个事件或等待时生效"""
        self._interrupted.set()

    def _raise_if_interrupted(self, wait_ms: int) -> None:
        if self._interrupted.is_set():
            self._interrupted.clear()
            logger.error("时间控制器被中断")
            raise ReplayInterruptedError(wait_ms)

    def _require_started(self, operation: str) -> RecordedTest:
        if self._test is None:
            raise ReplayStateError(operation, self.state.value)
        return self._test

    # ============== 运行时调整 ==============

    def _set_safe_mode(self, value: str) -> None:
        if parse_flag(value):
            self._safe_mode.set()
        else:
            self._safe_mode.clear()

    def tweak_keys(self) -> set[TweakKey]:
        return set(self._tweak_setters)

    def set_tweak(self, key: str | TweakKey, value: str) -> None:
        tweak_key = TweakKey.parse(key)
        if tweak_key is None:
            logger.debug(f"忽略未使用的调整键: {key}")
            return
        self._tweak_setters[tweak_key](value)
        logger.info(f"{tweak_key.value} 现在为 {self.get_tweak(tweak_key)}")

    def get_tweak(self, key: str | TweakKey) -> Optional[str]:
        tweak_key = TweakKey.parse(key)
        if tweak_key is None:
            return None
        return self._tweak_getters[tweak_key]()

    def tweak_description(self, key: str | TweakKey) -> str:
        tweak_key = TweakKey.parse(key)
        if tweak_key is None:
            return UNUSED_KEY_DESCRIPTION
        return TWEAK_DESCRIPTIONS[tweak_key]
