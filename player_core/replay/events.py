"""
事件流构建

把截图检查/鼠标/键盘三类事件合并成一条按时间排序的事件流
"""


from __future__ import annotations
from itertools import chain
from typing import Iterable, Sequence

from player_core.schema.models import MouseOffsets, ReplayEvent


def merge_and_filter(
    screen_checks: Iterable[ReplayEvent],
    mouse_events: Iterable[ReplayEvent],
    keyboard_events: Iterable[ReplayEvent],
    mask: int,
) -> list[ReplayEvent]:
    """
    合并并过滤事件

    按 截图检查 -> 鼠标 -> 键盘 的顺序拼接, 去掉子类型不在掩码中的事件,
    再按时间戳稳定排序. 时间戳相同的事件保持拼接顺序.

    Args:
        screen_checks: 截图检查事件
        mouse_events: 鼠标事件
        keyboard_events: 键盘事件
        mask: 回放掩码

    Returns:
        排序后的事件列表
    """
    merged = [
        event
        for event in chain(screen_checks, mouse_events, keyboard_events)
        if event.sub_type.in_mask(mask)
    ]
    merged.sort(key=lambda event: event.timestamp)
    return merged


def truncate_events(events: Sequence[ReplayEvent], start: int, end: int) -> list[ReplayEvent]:
    """丢弃开头 start 个和结尾 end 个事件, 小于等于0的值不丢弃"""
    start = max(start, 0)
    end = max(end, 0)
    if start + end >= len(events):
        return []
    return list(events[start:len(events) - end])


def apply_mouse_offsets(event: ReplayEvent, offsets: MouseOffsets) -> ReplayEvent:
    """返回平移了坐标的鼠标事件副本"""
    if not event.sub_type.is_mouse:
        return event
    if (offsets.x == 0 and offsets.y == 0) or "x" not in event.payload or "y" not in event.payload:
        return event

    payload = dict(event.payload)
    payload["x"] = payload["x"] + offsets.x
    payload["y"] = payload["y"] + offsets.y
    return event.model_copy(update={"payload": payload})
