"""Services Module - 外部协作者（状态上报、传感器、文件选择）"""

from .status import (
    StatusReporter,
    LoggingStatusReporter,
    TextStatusReporter,
    publish_safely,
)
from .sensor import SensorSource, SensorFrame, ScriptedSensorSource, SyntheticBodySource
from .file_selection import FileSelection

__all__ = [
    "StatusReporter",
    "LoggingStatusReporter",
    "TextStatusReporter",
    "publish_safely",
    "SensorSource",
    "SensorFrame",
    "ScriptedSensorSource",
    "SyntheticBodySource",
    "FileSelection",
]
