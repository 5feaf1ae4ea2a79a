"""
预处理流水线

按优先级依次执行预处理器
"""


from __future__ import annotations
from typing import Iterable, Optional

from player_core.config import PlayerConfig
from player_core.logging import get_logger
from player_core.preprocessing.base import BasePreProcessor
from player_core.preprocessing.overrides import OverridesPreProcessor
from player_core.preprocessing.truncations import TruncationsPreProcessor
from player_core.schema.models import RecordedTest

logger = get_logger(__name__)


class PreProcessingPipeline:
    """预处理流水线"""

    def __init__(self, processors: Optional[Iterable[BasePreProcessor]] = None):
        self._processors: list[BasePreProcessor] = []
        for processor in processors or []:
            self.register(processor)

    @classmethod
    def from_config(cls, config: PlayerConfig) -> "PreProcessingPipeline":
        """默认流水线: 覆盖 -> 截断"""
        return cls([
            OverridesPreProcessor(config.overrides),
            TruncationsPreProcessor(),
        ])

    def register(self, processor: BasePreProcessor) -> None:
        """注册预处理器"""
        self._processors.append(processor)
        self._processors.sort(key=lambda p: p.priority)

    @property
    def processors(self) -> list[BasePreProcessor]:
        return list(self._processors)

    def run(self, test: RecordedTest) -> bool:
        """
        执行所有预处理器

        Returns:
            测试是否应该继续回放
        """
        for processor in self._processors:
            if not processor.pre_process(test):
                logger.info(f"预处理器 {processor.name} 跳过了测试 {test.name}")
                return False
        return True
