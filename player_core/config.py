"""
回放器配置中心

统一管理所有配置:
- 日志配置 (logging)
- 时间控制器配置 (time_controller)
- 覆盖配置 (overrides): 回放模式/时序/截断/鼠标偏移
"""


from __future__ import annotations
import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from player_core.exceptions import ConfigError

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = "INFO"  # 命令行 --log-level 可覆盖
    rotation: str = "10 MB"
    retention: str = "30 days"
    log_dir: str = "logs"


class TimeControllerConfig(BaseModel):
    """时间控制器配置"""
    safe_mode: bool = False  # 开启后忽略最大等待限制


class ReproductionOverrideConfig(BaseModel):
    """回放模式覆盖"""
    enabled: bool = False
    mode: int = 0  # 与录制的回放掩码按位与


class TimingsOverrideConfig(BaseModel):
    """时序覆盖, -1 表示不覆盖 (max_wait_ns 为 -2, 因为 -1 本身表示不限)"""
    enabled: bool = False
    start_delay_ms: int = -1
    sc_delay_ms: int = -1
    min_wait_ns: int = -1
    min_wait_floor_ms: int = -1
    max_wait_ns: int = -2


class TruncationsOverrideConfig(BaseModel):
    """截断覆盖, -1 表示不覆盖"""
    enabled: bool = False
    mouse_start: int = -1
    mouse_end: int = -1
    kb_start: int = -1
    kb_end: int = -1


class MouseOffsetsOverrideConfig(BaseModel):
    """鼠标偏移覆盖"""
    enabled: bool = False
    x: int = 0
    y: int = 0


class OverridesConfig(BaseModel):
    """覆盖配置"""
    reproduction: ReproductionOverrideConfig = Field(default_factory=ReproductionOverrideConfig)
    timings: TimingsOverrideConfig = Field(default_factory=TimingsOverrideConfig)
    truncations: TruncationsOverrideConfig = Field(default_factory=TruncationsOverrideConfig)
    mouse_offsets: MouseOffsetsOverrideConfig = Field(default_factory=MouseOffsetsOverrideConfig)


class PlayerConfig(BaseSettings):
    """回放器主配置"""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    time_controller: TimeControllerConfig = Field(default_factory=TimeControllerConfig)
    overrides: OverridesConfig = Field(default_factory=OverridesConfig)

    model_config = {
        "env_prefix": "PLAYER_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "PlayerConfig":
        """从YAML文件加载配置"""
        config_path = Path(config_path)
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(str(config_path), str(e)) from e

        return cls(**config_data)

    def get_path(self, relative_path: str) -> Path:
        """获取相对于项目根目录的绝对路径"""
        return PROJECT_ROOT / relative_path

    def get_logs_path(self) -> Path:
        """获取日志目录路径"""
        return self.get_path(self.logging.log_dir)


@lru_cache()
def get_config() -> PlayerConfig:
    """获取回放器配置单例"""
    config_path = os.environ.get("PLAYER_CONFIG", "configs/player.yaml")
    return PlayerConfig.from_yaml(PROJECT_ROOT / config_path)


def reload_config() -> PlayerConfig:
    """重新加载配置"""
    get_config.cache_clear()
    return get_config()
