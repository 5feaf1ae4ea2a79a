"""
命令行入口

以演练模式回放录制文件: 事件只写日志, 截图检查总是通过
"""


from __future__ import annotations
import argparse
from pathlib import Path
from typing import Optional, Sequence

from player_core.config import PlayerConfig, get_config
from player_core.exceptions import PlayerError
from player_core.logging import get_logger, setup_logging
from player_core.preprocessing import PreProcessingPipeline
from player_core.replay import (
    AlwaysPassScreenChecker,
    LoggingEventSink,
    ReplayPlayer,
    ReplayStatus,
    TimeController,
    TweakKey,
    load_recording,
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description="录制事件回放器 (演练模式)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "recording",
        type=str,
        help="JSON录制文件路径",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="配置文件路径 (默认: $PLAYER_CONFIG 或 configs/player.yaml)",
    )
    parser.add_argument(
        "--safe",
        action="store_true",
        help="安全模式, 忽略最大等待限制",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="日志级别 (默认: 配置中的 logging.level)",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="日志目录, 每次回放另存一份 replay.log (默认: 配置中的 logging.log_dir)",
    )

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """主函数"""
    args = parse_args(argv)

    config = PlayerConfig.from_yaml(args.config) if args.config else get_config()
    log_dir = Path(args.log_dir) if args.log_dir else config.get_logs_path()
    setup_logging(config.logging, log_dir, log_level=args.log_level)
    logger = get_logger(__name__)

    controller = TimeController(safe_mode=config.time_controller.safe_mode)
    if args.safe:
        controller.set_tweak(TweakKey.SAFE, "true")

    player = ReplayPlayer(
        controller=controller,
        pipeline=PreProcessingPipeline.from_config(config),
        sink=LoggingEventSink(),
        screen_checker=AlwaysPassScreenChecker(),
    )

    try:
        test = load_recording(args.recording)
    except PlayerError as e:
        logger.error(e.message)
        return 2

    try:
        result = player.run(test, log_dir=log_dir)
    except KeyboardInterrupt:
        logger.warning("回放被用户中断")
        return 130

    logger.info(f"结果: {result.status.value}, 耗时 {result.duration_ms:.0f}ms")
    return 0 if result.status == ReplayStatus.PASSED else 1


if __name__ == "__main__":
    raise SystemExit(main())
