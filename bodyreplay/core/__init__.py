"""
Core Module - 录制回放核心层

包含:
- errors: 异常定义
- replay: 录制与回放系统
"""

from .errors import (
    ReplayError,
    RecordingConfigError,
    RecordingIOError,
    RecordFormatError,
    StateConflictError,
)
from .replay import (
    FrameRecord,
    PlaybackSpeed,
    TransportMode,
    FrameStore,
    RecordingReader,
    RecordingWriter,
    PlaybackCursor,
    SessionState,
    RecordingInfo,
    inspect_recording,
    PlayerConfig,
    RecorderPlayer,
    create_recorder_player,
    TickDriver,
)

__all__ = [
    # Errors
    "ReplayError",
    "RecordingConfigError",
    "RecordingIOError",
    "RecordFormatError",
    "StateConflictError",
    # Replay
    "FrameRecord",
    "PlaybackSpeed",
    "TransportMode",
    "FrameStore",
    "RecordingReader",
    "RecordingWriter",
    "PlaybackCursor",
    "SessionState",
    "RecordingInfo",
    "inspect_recording",
    "PlayerConfig",
    "RecorderPlayer",
    "create_recorder_player",
    "TickDriver",
]
