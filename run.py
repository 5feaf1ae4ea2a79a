#!/usr/bin/env python3
"""
快速启动脚本

用法:
    python run.py recording.json            # 演练模式回放
    python run.py recording.json --safe     # 安全模式, 忽略最大等待限制
"""

import sys
from pathlib import Path

# 添加项目根目录到路径
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))


if __name__ == "__main__":
    from player_core.cli import main
    raise SystemExit(main())
