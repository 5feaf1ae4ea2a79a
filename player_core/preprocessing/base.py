"""
预处理器基类

测试开始回放前按优先级依次执行预处理器, 预处理器可以修改录制的测试
"""


from __future__ import annotations
from abc import ABC, abstractmethod

from player_core.schema.models import RecordedTest


class BasePreProcessor(ABC):
    """
    预处理器基类

    priority 越小越先执行. pre_process 返回False时后续预处理器不再执行,
    测试也不回放.
    """

    name: str = "base"
    priority: int = 100

    @abstractmethod
    def pre_process(self, test: RecordedTest) -> bool:
        """处理测试, 返回是否继续"""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name} [{self.priority}]>"
