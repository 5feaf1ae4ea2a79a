"""
统一数据模型定义

所有数据模型使用Pydantic v2定义
录制文件使用camelCase键名, 模型同时接受字段名和别名
"""


from __future__ import annotations
from enum import IntEnum, IntFlag
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# 未设置 (不限制/无下限)
UNSET = -1

NS_PER_MS = 1_000_000


class RecordingModel(BaseModel):
    """录制数据基础模型"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============== 事件模型 ==============

class EventSubType(IntFlag):
    """事件子类型, 每个类型占回放掩码中的一位"""
    MOUSE_MOVE = 1
    MOUSE_BUTTON = 2
    MOUSE_WHEEL = 4
    KEYBOARD = 8
    SCREEN_CHECK = 16

    def in_mask(self, mask: int) -> bool:
        return bool(self.value & mask)

    @property
    def is_mouse(self) -> bool:
        return bool(self.value & MOUSE_EVENTS)


MOUSE_EVENTS = EventSubType.MOUSE_MOVE | EventSubType.MOUSE_BUTTON | EventSubType.MOUSE_WHEEL


class PlayMode(IntEnum):
    """常用回放掩码"""
    ALL = 31
    NO_MOVE = 30  # 不回放鼠标移动
    CHECKS_ONLY = 16  # 只做截图检查


class ReplayEvent(RecordingModel):
    """录制事件"""
    timestamp: int = Field(ge=0)  # 相对测试开始的纳秒数
    sub_type: EventSubType
    payload: dict[str, Any] = Field(default_factory=dict)

    @field_validator("sub_type", mode="before")
    @classmethod
    def parse_sub_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return EventSubType[v.upper()]
            except KeyError:
                raise ValueError(f"未知事件类型: {v}") from None
        return v


# ============== 测试参数模型 ==============

class Timings(RecordingModel):
    """
    单个测试的时序参数

    注意 max_wait_ns 虽然名为纳秒, 录制中实际存的是毫秒,
    只在与等待时间比较时乘以 NS_PER_MS. 为保持回放速度不变, 不做改名.
    """
    start_delay_ms: int = Field(default=300, ge=UNSET)
    sc_delay_ms: int = Field(default=50, ge=UNSET)
    min_wait_ns: int = Field(default=1_000_000, ge=UNSET)
    min_wait_floor_ms: int = Field(default=UNSET, ge=UNSET)
    max_wait_ns: int = Field(default=UNSET, ge=UNSET)

    @property
    def has_floor(self) -> bool:
        return self.min_wait_floor_ms > UNSET

    @property
    def has_ceiling(self) -> bool:
        return self.max_wait_ns > UNSET


class Truncations(RecordingModel):
    """鼠标/键盘事件流首尾要丢弃的事件数"""
    mouse_start: int = Field(default=0, ge=UNSET)
    mouse_end: int = Field(default=0, ge=UNSET)
    kb_start: int = Field(default=0, ge=UNSET)
    kb_end: int = Field(default=0, ge=UNSET)


class MouseOffsets(RecordingModel):
    """鼠标坐标偏移"""
    x: int = 0
    y: int = 0


class RecordedTest(RecordingModel):
    """
    录制的测试

    加载后只有预处理阶段会修改 timings/truncations/mouse_offsets/preferred_play_mode
    """
    name: str
    timings: Timings = Field(default_factory=Timings)
    truncations: Truncations = Field(default_factory=Truncations)
    mouse_offsets: MouseOffsets = Field(default_factory=MouseOffsets)
    mouse_events: list[ReplayEvent] = Field(default_factory=list)
    keyboard_events: list[ReplayEvent] = Field(default_factory=list)
    screen_checks: list[ReplayEvent] = Field(default_factory=list)
    preferred_play_mode: int = Field(default=PlayMode.ALL, ge=0)

    @property
    def event_count(self) -> int:
        return len(self.mouse_events) + len(self.keyboard_events) + len(self.screen_checks)
