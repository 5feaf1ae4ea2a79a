"""
运行时调整 (tweak)

供运维控制台在回放过程中修改组件行为
"""


from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

UNUSED_KEY_DESCRIPTION = "Key not being used by this component"

# 视为关闭的取值 (不区分大小写)
FALSE_VALUES = frozenset({"false", "0"})


class TweakKey(str, Enum):
    """已知的调整键"""
    SAFE = "safe"

    @classmethod
    def parse(cls, key: str | TweakKey) -> Optional[TweakKey]:
        if isinstance(key, TweakKey):
            return key
        try:
            return cls(key.lower())
        except ValueError:
            return None


def parse_flag(value: str) -> bool:
    """'false'/'0' 为 False, 其他任何值为 True"""
    return value.lower() not in FALSE_VALUES


class TweakableComponent(ABC):
    """可在运行时调整的组件"""

    @abstractmethod
    def tweak_keys(self) -> set[TweakKey]:
        """组件支持的调整键"""
        pass

    @abstractmethod
    def set_tweak(self, key: str | TweakKey, value: str) -> None:
        """设置调整值, 不支持的键被忽略"""
        pass

    @abstractmethod
    def get_tweak(self, key: str | TweakKey) -> Optional[str]:
        """读取调整值, 不支持的键返回None"""
        pass

    @abstractmethod
    def tweak_description(self, key: str | TweakKey) -> str:
        """调整键的说明"""
        pass
