"""
Schema校验单元测试
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

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
from player_core.exceptions import SchemaValidationError


class TestEventSubType:
    """测试事件子类型"""

    def test_in_mask(self):
        """测试掩码判断"""
        mask = EventSubType.MOUSE_BUTTON | EventSubType.KEYBOARD
        assert EventSubType.MOUSE_BUTTON.in_mask(mask)
        assert EventSubType.KEYBOARD.in_mask(mask)
        assert not EventSubType.MOUSE_MOVE.in_mask(mask)
        assert not EventSubType.SCREEN_CHECK.in_mask(0)

    def test_play_modes(self):
        """测试常用回放掩码"""
        for sub_type in EventSubType:
            assert sub_type.in_mask(PlayMode.ALL)
        assert not EventSubType.MOUSE_MOVE.in_mask(PlayMode.NO_MOVE)
        assert EventSubType.MOUSE_BUTTON.in_mask(PlayMode.NO_MOVE)
        assert EventSubType.SCREEN_CHECK.in_mask(PlayMode.CHECKS_ONLY)
        assert not EventSubType.KEYBOARD.in_mask(PlayMode.CHECKS_ONLY)

    def test_is_mouse(self):
        """测试鼠标事件判断"""
        assert EventSubType.MOUSE_MOVE.is_mouse
        assert EventSubType.MOUSE_WHEEL.is_mouse
        assert not EventSubType.KEYBOARD.is_mouse
        assert not EventSubType.SCREEN_CHECK.is_mouse


class TestReplayEvent:
    """测试事件模型"""

    def test_sub_type_from_name(self):
        """测试用名称指定子类型"""
        event = ReplayEvent.model_validate({"timestamp": 5, "subType": "mouse_button"})
        assert event.sub_type == EventSubType.MOUSE_BUTTON
        assert event.payload == {}

    def test_sub_type_from_int(self):
        """测试用整数指定子类型"""
        event = ReplayEvent.model_validate({"timestamp": 5, "subType": 8})
        assert event.sub_type == EventSubType.KEYBOARD

    def test_unknown_sub_type(self):
        """测试未知子类型"""
        with pytest.raises(ValueError):
            ReplayEvent.model_validate({"timestamp": 5, "subType": "joystick"})

    def test_negative_timestamp(self):
        """测试负时间戳"""
        with pytest.raises(ValueError):
            ReplayEvent(timestamp=-1, sub_type=EventSubType.KEYBOARD)


class TestTimings:
    """测试时序模型"""

    def test_defaults(self):
        """测试默认值"""
        timings = Timings()
        assert timings.start_delay_ms == 300
        assert timings.sc_delay_ms == 50
        assert timings.min_wait_ns == 1_000_000
        assert timings.min_wait_floor_ms == -1
        assert timings.max_wait_ns == -1
        assert not timings.has_floor
        assert not timings.has_ceiling

    def test_camel_case_aliases(self):
        """测试录制文件中的camelCase键名"""
        timings = Timings.model_validate({"startDelayMs": 0, "maxWaitNs": 200, "minWaitFloorMs": 3})
        assert timings.start_delay_ms == 0
        assert timings.max_wait_ns == 200
        assert timings.has_ceiling
        assert timings.has_floor
        assert timings.model_dump(by_alias=True)["scDelayMs"] == 50

    def test_below_unset_rejected(self):
        """测试小于-1的值无效"""
        with pytest.raises(ValueError):
            Timings(max_wait_ns=-2)


class TestRecordedTest:
    """测试录制测试模型"""

    def test_minimal(self):
        """测试最小录制"""
        test = RecordedTest(name="empty")
        assert test.preferred_play_mode == PlayMode.ALL
        assert test.truncations == Truncations()
        assert test.mouse_offsets == MouseOffsets()
        assert test.event_count == 0

    def test_validate_recording(self):
        """测试录制验证"""
        data = {
            "name": "demo",
            "preferredPlayMode": 30,
            "mouseEvents": [{"timestamp": 10, "subType": "mouse_move", "payload": {"x": 1, "y": 2}}],
            "keyboardEvents": [{"timestamp": 20, "subType": "keyboard"}],
            "screenChecks": [{"timestamp": 30, "subType": "screen_check"}],
            "mouseOffsets": {"x": -3, "y": 4},
        }
        test = validate_recording(data)
        assert test.name == "demo"
        assert test.preferred_play_mode == 30
        assert test.event_count == 3
        assert test.mouse_offsets.x == -3

    def test_event_in_wrong_stream(self):
        """测试事件放错事件流"""
        data = {
            "name": "bad",
            "keyboardEvents": [{"timestamp": 20, "subType": "mouse_move"}],
        }
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_recording(data)
        assert exc_info.value.errors[0]["loc"] == "keyboardEvents.0.subType"

        # 非严格模式不检查
        assert validate_recording(data, strict=False).event_count == 1

    def test_missing_name(self):
        """测试缺少名称"""
        with pytest.raises(SchemaValidationError) as exc_info:
            SchemaValidator.validate({}, RecordedTest)
        assert exc_info.value.code == "SCHEMA_VALIDATION_ERROR"
        assert not SchemaValidator.is_valid({}, RecordedTest)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
