"""
录制事件回放核心
按录制时序回放鼠标/键盘/截图检查事件

模块列表:
- schema: 录制数据模型
- preprocessing: 回放前的覆盖/截断处理
- replay: 时间控制器与回放驱动
"""

from __future__ import annotations

# 版本
__version__ = "1.0.0"

# 显式导入 - 数据模型
from player_core.schema import (
    EventSubType,
    MouseOffsets,
    PlayMode,
    RecordedTest,
    ReplayEvent,
    Timings,
    Truncations,
)

# 显式导入 - 预处理
from player_core.preprocessing import (
    OverridesPreProcessor,
    PreProcessingPipeline,
    TruncationsPreProcessor,
    override_timing,
)

# 显式导入 - 回放
from player_core.replay import (
    ReplayPlayer,
    ReplayResult,
    ReplayStatus,
    TimeController,
    TweakKey,
    load_recording,
    merge_and_filter,
)

# 导出列表
__all__ = [
    # 数据模型
    "EventSubType",
    "MouseOffsets",
    "PlayMode",
    "RecordedTest",
    "ReplayEvent",
    "Timings",
    "Truncations",

    # 预处理
    "OverridesPreProcessor",
    "PreProcessingPipeline",
    "TruncationsPreProcessor",
    "override_timing",

    # 回放
    "ReplayPlayer",
    "ReplayResult",
    "ReplayStatus",
    "TimeController",
    "TweakKey",
    "load_recording",
    "merge_and_filter",
]
