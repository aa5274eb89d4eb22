"""
bodyreplay - 骨骼帧数据录制与回放

录制实时帧流到按行存储的文件，并在操作者控制下回放
（播放、暂停、拖动、调速）。
"""

from .core import (
    ReplayError,
    FrameRecord,
    PlaybackSpeed,
    TransportMode,
    FrameStore,
    PlaybackCursor,
    RecordingInfo,
    inspect_recording,
    PlayerConfig,
    RecorderPlayer,
    create_recorder_player,
    TickDriver,
)
from .services import (
    FileSelection,
    LoggingStatusReporter,
    TextStatusReporter,
    ScriptedSensorSource,
)

__version__ = "0.1.0"

__all__ = [
    "ReplayError",
    "FrameRecord",
    "PlaybackSpeed",
    "TransportMode",
    "FrameStore",
    "PlaybackCursor",
    "RecordingInfo",
    "inspect_recording",
    "PlayerConfig",
    "RecorderPlayer",
    "create_recorder_player",
    "TickDriver",
    "FileSelection",
    "LoggingStatusReporter",
    "TextStatusReporter",
    "ScriptedSensorSource",
]
