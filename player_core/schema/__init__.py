"""
统一Schema校验模块

定义所有数据模型和校验规则:
- 事件模型
- 时序/截断/鼠标偏移模型
- 录制测试模型
"""


from __future__ import annotations
from player_core.schema.models import (
    EventSubType,
    MouseOffsets,
    PlayMode,
    RecordedTest,
    ReplayEvent,
    Timings,
    Truncations,
)
from player_core.schema.validator import SchemaValidator, validate_recording

__all__ = [
    "EventSubType",
    "MouseOffsets",
    "PlayMode",
    "RecordedTest",
    "ReplayEvent",
    "Timings",
    "Truncations",
    "SchemaValidator",
    "validate_recording",
]
