"""
回放日志

基于loguru:
- 日志级别/目录/轮转来自 PlayerConfig.logging
- 每条记录带上当前回放的 test_name 和 run_id
- replay_context 内的所有日志 (包括时间控制器和注入接口) 可另存到单次回放的 replay.log
"""


from __future__ import annotations
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generator, Optional

from loguru import logger

if TYPE_CHECKING:
    from player_core.config import LoggingConfig

# 回放之外的记录使用占位值, 格式里的 extra 字段总是存在
NO_RUN = "-"

logger.remove()
logger.configure(extra={"test_name": NO_RUN, "run_id": NO_RUN})

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <7}</level> | "
    "<magenta>{extra[test_name]}</magenta> | "
    "<cyan>{name}</cyan> - "
    "<level>{message}</level>"
)

LOG_FORMAT_FILE = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | "
    "{extra[test_name]}#{extra[run_id]} | {name}:{line} | {message}"
)


def setup_logging(
    log_config: LoggingConfig,
    log_dir: Path,
    log_level: Optional[str] = None,
    console: bool = True,
) -> None:
    """
    配置日志输出

    Args:
        log_config: 日志配置
        log_dir: 日志目录
        log_level: 覆盖配置中的日志级别
        console: 是否输出到stderr
    """
    level = log_level or log_config.level
    log_dir.mkdir(parents=True, exist_ok=True)

    if console:
        logger.add(sys.stderr, format=LOG_FORMAT, level=level, colorize=True)

    logger.add(
        log_dir / "player.log",
        format=LOG_FORMAT_FILE,
        level=level,
        rotation=log_config.rotation,
        retention=log_config.retention,
        compression="gz",
        encoding="utf-8",
    )

    logger.info(f"日志级别 {level}, 日志目录: {log_dir}")


def get_logger(name: str = __name__) -> Any:
    """获取带模块名的logger"""
    return logger.bind(name=name)


@contextmanager
def replay_context(
    test_name: str,
    run_id: str,
    run_dir: Optional[Path] = None,
) -> Generator[Optional[Path], None, None]:
    """
    单次回放的日志上下文

    Args:
        test_name: 测试名
        run_id: 回放ID
        run_dir: 为None时不单独写 replay.log

    Yields:
        replay.log 路径 (未单独记录时为None)
    """
    handler_id = None
    log_file = None
    if run_dir is not None:
        run_dir.mkdir(parents=True, exist_ok=True)
        log_file = run_dir / "replay.log"
        handler_id = logger.add(
            log_file,
            format=LOG_FORMAT_FILE,
            level="DEBUG",
            encoding="utf-8",
            filter=lambda record: record["extra"]["run_id"] == run_id,
        )

    try:
        with logger.contextualize(test_name=test_name, run_id=run_id):
            yield log_file
    finally:
        if handler_id is not None:
            logger.remove(handler_id)


__all__ = [
    "logger",
    "get_logger",
    "setup_logging",
    "replay_context",
]
