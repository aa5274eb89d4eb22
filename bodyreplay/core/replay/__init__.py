"""
Core Replay Module - 录制与回放系统

- message: 帧记录与枚举定义（基于 Pydantic）
- store: 只读帧存储
- codec: 录制文件编解码
- cursor: 回放游标
- session: 会话状态与录制文件信息
- transport: 录制回放传输状态机
- driver: 固定步长 tick 驱动
"""

from .message import (
    RECORD_DELIMITER,
    FrameRecord,
    PlaybackSpeed,
    TransportMode,
)
from .store import FrameStore
from .codec import (
    RecordingReader,
    RecordingWriter,
    format_record_line,
    parse_record_line,
    load_frame_store,
)
from .cursor import PlaybackCursor
from .session import (
    SessionState,
    RecordingInfo,
    inspect_recording,
)
from .transport import (
    PlayerConfig,
    RecorderPlayer,
    create_recorder_player,
)
from .driver import TickDriver

__all__ = [
    # Message types
    "RECORD_DELIMITER",
    "FrameRecord",
    "PlaybackSpeed",
    "TransportMode",
    # Store / codec
    "FrameStore",
    "RecordingReader",
    "RecordingWriter",
    "format_record_line",
    "parse_record_line",
    "load_frame_store",
    # Cursor / session
    "PlaybackCursor",
    "SessionState",
    "RecordingInfo",
    "inspect_recording",
    # Transport
    "PlayerConfig",
    "RecorderPlayer",
    "create_recorder_player",
    "TickDriver",
]
