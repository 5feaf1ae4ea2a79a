"""
预处理模块

负责:
- 按回放器配置覆盖录制参数
- 截断录制首尾的无用事件
"""


from __future__ import annotations
from player_core.preprocessing.base import BasePreProcessor
from player_core.preprocessing.overrides import (
    MAX_WAIT_OVERRIDE_THRESHOLD,
    OVERRIDE_THRESHOLD,
    OverridesPreProcessor,
    override_timing,
    override_truncation,
)
from player_core.preprocessing.pipeline import PreProcessingPipeline
from player_core.preprocessing.truncations import TruncationsPreProcessor

__all__ = [
    "BasePreProcessor",
    "MAX_WAIT_OVERRIDE_THRESHOLD",
    "OVERRIDE_THRESHOLD",
    "OverridesPreProcessor",
    "PreProcessingPipeline",
    "TruncationsPreProcessor",
    "override_timing",
    "override_truncation",
]
