"""
回放播放器

驱动一次完整的测试回放:
- 从录制文件加载测试
- 执行预处理 (覆盖/截断)
- 轮询时间控制器, 把事件交给注入接口
- 截图检查并汇总结果
"""


from __future__ import annotations
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from player_core.exceptions import RecordingError, ReplayInterruptedError
from player_core.logging import get_logger, replay_context
from player_core.replay.base import EventSink, ScreenChecker
from player_core.replay.events import apply_mouse_offsets
from player_core.replay.time_controller import TimeController
from player_core.schema.models import EventSubType, RecordedTest
from player_core.schema.validator import validate_recording

if TYPE_CHECKING:
    from player_core.preprocessing.pipeline import PreProcessingPipeline

logger = get_logger(__name__)


class ReplayStatus(str, Enum):
    """回放结果状态"""
    PASSED = "passed"
    FAILED = "failed"
    ABORTED = "aborted"
    SKIPPED = "skipped"


@dataclass
class ReplayResult:
    """单次回放结果"""
    test_name: str
    run_id: str
    status: ReplayStatus = ReplayStatus.PASSED
    events_posted: int = 0
    screen_checks: int = 0
    failed_checks: int = 0
    error_message: str = ""
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def duration_ms(self) -> float:
        if self.completed_at is None:
            return 0
        return (self.completed_at - self.started_at).total_seconds() * 1000

    def to_dict(self) -> dict:
        return {
            "test_name": self.test_name,
            "run_id": self.run_id,
            "status": self.status.value,
            "events_posted": self.events_posted,
            "screen_checks": self.screen_checks,
            "failed_checks": self.failed_checks,
            "error_message": self.error_message,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
        }


def load_recording(path: str | Path) -> RecordedTest:
    """
    加载录制文件

    Args:
        path: JSON录制文件路径

    Returns:
        录制的测试

    Raises:
        RecordingError: 文件不存在或无法解析
        SchemaValidationError: 录制格式不符合规范
    """
    path = Path(path)
    if not path.exists():
        raise RecordingError(str(path), "录制文件不存在")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RecordingError(str(path), f"无法读取录制文件: {e}") from e

    test = validate_recording(data)
    logger.info(f"录制已加载: {test.name}, {test.event_count} 个事件")
    return test


class ReplayPlayer:
    """
    回放播放器

    同一时间只回放一个测试
    """

    def __init__(
        self,
        controller: TimeController,
        pipeline: PreProcessingPipeline,
        sink: EventSink,
        screen_checker: ScreenChecker,
    ):
        self.controller = controller
        self.pipeline = pipeline
        self.sink = sink
        self.screen_checker = screen_checker

    def run(self, test: RecordedTest, log_dir: Optional[Path] = None) -> ReplayResult:
        """
        回放一个测试

        Args:
            test: 录制的测试, 预处理会直接修改它
            log_dir: 单次回放日志目录, 为None时不单独记录

        Returns:
            回放结果
        """
        result = ReplayResult(test_name=test.name, run_id=str(uuid4()))
        run_dir = log_dir / result.run_id if log_dir is not None else None

        with replay_context(test.name, result.run_id, run_dir):
            try:
                if not self.pipeline.run(test):
                    result.status = ReplayStatus.SKIPPED
                    logger.info(f"测试 {test.name} 被预处理跳过")
                    return result

                logger.info(f"开始回放 {test.name} (run_id={result.run_id})")
                # start 会清除上一个测试遗留的中断
                self.controller.start(test)
                self.controller.wait_for_start()
                self._replay_events(test, result)

                result.status = ReplayStatus.PASSED if result.failed_checks == 0 else ReplayStatus.FAILED
                logger.info(
                    f"回放完成 {test.name}: {result.status.value}, "
                    f"{result.events_posted} 个事件, {result.failed_checks}/{result.screen_checks} 个截图检查失败"
                )

            except ReplayInterruptedError as e:
                result.status = ReplayStatus.ABORTED
                result.error_message = e.message
                logger.error(f"回放中止 {test.name}: {e.message}")

            finally:
                result.completed_at = datetime.now()

        return result

    def _replay_events(self, test: RecordedTest, result: ReplayResult) -> None:
        while True:
            event = self.controller.next_event()
            if event is None:
                break

            if event.sub_type == EventSubType.SCREEN_CHECK:
                self.controller.wait_for_screen()
                result.screen_checks += 1
                if not self.screen_checker.check(test, event):
                    result.failed_checks += 1
                    logger.warning(f"截图检查失败: {test.name} @{event.timestamp}")
            elif event.sub_type.is_mouse:
                self.sink.post_mouse(apply_mouse_offsets(event, test.mouse_offsets))
                result.events_posted += 1
            else:
                self.sink.post_keyboard(event)
                result.events_posted += 1

    def stop(self) -> None:
        """
        请求中止正在进行的回放

        可以从其他线程调用. 正在进行的等待立即结束; 正在注入事件时,
        在取下一个事件前中止. 没有回放在进行时, 请求随下一个测试的开始而丢弃.
        """
        logger.info("请求停止回放")
        self.controller.interrupt()
