"""
Schema校验器

提供统一的数据验证功能:
- 验证录制文件格式
- 验证事件是否放在了正确的事件流中
"""


from __future__ import annotations
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from player_core.exceptions import SchemaValidationError
from player_core.schema.models import EventSubType, RecordedTest

T = TypeVar("T", bound=BaseModel)


def _format_errors(e: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "loc": ".".join(str(x) for x in err["loc"]),
            "msg": err["msg"],
            "type": err["type"],
        }
        for err in e.errors()
    ]


class SchemaValidator:
    """Schema校验器"""

    @staticmethod
    def validate(data: dict[str, Any], schema: Type[T], strict: bool = False) -> T:
        """
        验证数据是否符合Schema

        Args:
            data: 待验证的数据字典
            schema: Pydantic模型类
            strict: 是否严格模式 (不做类型转换)

        Returns:
            验证通过的模型实例

        Raises:
            SchemaValidationError: 验证失败时抛出
        """
        try:
            if strict:
                return schema.model_validate(data, strict=True)
            return schema.model_validate(data)
        except ValidationError as e:
            raise SchemaValidationError(schema.__name__, _format_errors(e)) from e

    @staticmethod
    def is_valid(data: dict[str, Any], schema: Type[T]) -> bool:
        """检查数据是否有效 (不抛出异常)"""
        try:
            schema.model_validate(data)
            return True
        except ValidationError:
            return False


def validate_recording(data: dict[str, Any], strict: bool = True) -> RecordedTest:
    """
    验证录制数据

    Args:
        data: 录制文件的原始数据
        strict: 是否检查每个事件都在对应的事件流中

    Returns:
        验证通过的RecordedTest实例

    Raises:
        SchemaValidationError: 录制格式不符合规范
    """
    test = SchemaValidator.validate(data, RecordedTest)

    if strict:
        streams = (
            ("mouseEvents", test.mouse_events, lambda t: t.is_mouse),
            ("keyboardEvents", test.keyboard_events, lambda t: t == EventSubType.KEYBOARD),
            ("screenChecks", test.screen_checks, lambda t: t == EventSubType.SCREEN_CHECK),
        )
        errors = []
        for stream_name, events, accepts in streams:
            for i, event in enumerate(events):
                if not accepts(event.sub_type):
                    errors.append({
                        "loc": f"{stream_name}.{i}.subType",
                        "msg": f"{event.sub_type.name} 事件不能放在 {stream_name} 中",
                        "type": "value_error",
                    })
        if errors:
            raise SchemaValidationError(f"RecordedTest[{test.name}]", errors)

    return test
