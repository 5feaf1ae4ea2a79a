"""
回放器统一异常定义

所有回放器级别的异常都从PlayerError继承
便于统一处理和日志记录
"""


from __future__ import annotations
from typing import Any


class PlayerError(Exception):
    """回放器基础异常"""

    def __init__(self, message: str, code: str = "PLAYER_ERROR", details: dict[str, Any] | None = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ReplayInterruptedError(PlayerError):
    """
    等待被外部中断

    对当前测试是致命的, 不能在等待中途恢复
    """

    def __init__(self, wait_ms: int):
        self.wait_ms = wait_ms
        super().__init__(
            message=f"时间控制器被中断 (等待 {wait_ms}ms)",
            code="REPLAY_INTERRUPTED",
            details={"wait_ms": wait_ms},
        )


class ReplayStateError(PlayerError):
    """时间控制器状态错误"""

    def __init__(self, operation: str, state: str):
        self.operation = operation
        self.state = state
        super().__init__(
            message=f"无法在 {state} 状态下执行 {operation}",
            code="REPLAY_STATE_ERROR",
            details={"operation": operation, "state": state},
        )


class RecordingError(PlayerError):
    """录制文件相关异常"""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(
            message=f"[Recording: {path}] {message}",
            code="RECORDING_ERROR",
            details={"path": path},
        )


class SchemaValidationError(PlayerError):
    """Schema校验失败"""

    def __init__(self, schema_name: str, errors: list[dict[str, Any]]):
        self.schema_name = schema_name
        self.errors = errors
        super().__init__(
            message=f"Schema校验失败 [{schema_name}]: {len(errors)} 个错误",
            code="SCHEMA_VALIDATION_ERROR",
            details={"schema": schema_name, "errors": errors},
        )


class ConfigError(PlayerError):
    """配置相关异常"""

    def __init__(self, config_path: str, message: str):
        self.config_path = config_path
        super().__init__(
            message=f"配置错误 [{config_path}]: {message}",
            code="CONFIG_ERROR",
            details={"config_path": config_path},
        )
