"""
回放模块

支持:
- 事件流合并/过滤/截断
- 按录制时序回放事件 (时间控制器)
- 运行时调整安全模式
- 完整测试回放驱动
"""


from __future__ import annotations
from player_core.replay.events import apply_mouse_offsets, merge_and_filter, truncate_events
from player_core.replay.tweaks import TweakableComponent, TweakKey
from player_core.replay.time_controller import ControllerState, TimeController
from player_core.replay.base import (
    AlwaysPassScreenChecker,
    EventSink,
    LoggingEventSink,
    ScreenChecker,
)
from player_core.replay.player import ReplayPlayer, ReplayResult, ReplayStatus, load_recording

__all__ = [
    "apply_mouse_offsets",
    "merge_and_filter",
    "truncate_events",
    "TweakableComponent",
    "TweakKey",
    "ControllerState",
    "TimeController",
    "AlwaysPassScreenChecker",
    "EventSink",
    "LoggingEventSink",
    "ScreenChecker",
    "ReplayPlayer",
    "ReplayResult",
    "ReplayStatus",
    "load_recording",
]
