"""
Configuration - 环境变量配置

- BODYREPLAY_RECORDING_PATH: 录制/回放文件路径 (默认: BodyRecording.txt)
- BODYREPLAY_TICK_INTERVAL: 固定步长 tick 间隔，秒 (默认: 0.02)
- BODYREPLAY_LOG_LEVEL: 日志级别 (默认: INFO)
"""

import logging
import os

# 默认录制文件（可通过环境变量覆盖）
DEFAULT_RECORDING_PATH = os.environ.get("BODYREPLAY_RECORDING_PATH", "BodyRecording.txt")

# 固定步长（与传感器采集频率匹配）
DEFAULT_TICK_INTERVAL = float(os.environ.get("BODYREPLAY_TICK_INTERVAL", "0.02"))

DEFAULT_LOG_LEVEL = os.environ.get("BODYREPLAY_LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """配置根日志（仅供应用入口调用）"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
