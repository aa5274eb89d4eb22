"""
Core Replay Session - 会话状态与录制文件信息

- SessionState: 录制回放器唯一的运行时会话状态
- RecordingInfo: 录制文件摘要（帧数、时长、大小）
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

from .codec import RecordingReader
from .message import PlaybackSpeed, TransportMode

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """会话状态（每个录制回放器一份，只由传输操作修改）"""

    mode: TransportMode = TransportMode.IDLE
    paused: bool = False
    speed: PlaybackSpeed = PlaybackSpeed.NORMAL
    start_time: float = 0.0
    current_time: float = 0.0
    current_frame: int = 0

    @property
    def relative_time(self) -> float:
        return self.current_time - self.start_time

    def reset(self) -> None:
        """回到空闲状态（保留速度设置）"""
        self.mode = TransportMode.IDLE
        self.paused = False
        self.start_time = 0.0
        self.current_time = 0.0
        self.current_frame = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "paused": self.paused,
            "speed": self.speed.value,
            "start_time": self.start_time,
            "current_time": self.current_time,
            "current_frame": self.current_frame,
        }


class RecordingInfo(BaseModel):
    """录制文件摘要"""

    path: str = Field(..., description="文件路径")
    source_count: Optional[int] = Field(default=None, description="数据源数量")
    total_frames: int = Field(default=0, ge=0, description="有效帧数")
    skipped_lines: int = Field(default=0, ge=0, description="跳过的格式错误行数")
    duration: float = Field(default=0.0, ge=0, description="持续时间（秒）")
    size_bytes: int = Field(default=0, ge=0, description="文件大小")

    @property
    def file_name(self) -> str:
        return Path(self.path).name

    @property
    def duration_formatted(self) -> str:
        """格式化持续时间"""
        mins, secs = divmod(int(self.duration), 60)
        return f"{mins:02d}:{secs:02d}"

    @property
    def size_formatted(self) -> str:
        """格式化大小"""
        if self.size_bytes < 1024:
            return f"{self.size_bytes} B"
        elif self.size_bytes < 1024 * 1024:
            return f"{self.size_bytes / 1024:.1f} KB"
        else:
            return f"{self.size_bytes / (1024 * 1024):.1f} MB"

    @property
    def average_fps(self) -> float:
        if self.duration <= 0 or self.total_frames < 2:
            return 0.0
        return (self.total_frames - 1) / self.duration


def inspect_recording(path: Union[str, Path]) -> RecordingInfo:
    """
    读取录制文件摘要

    Raises:
        RecordingIOError: 文件不存在或不可读
    """
    path = Path(path)
    with RecordingReader(path) as reader:
        store = reader.load_store()
        info = RecordingInfo(
            path=str(path),
            source_count=reader.source_count,
            total_frames=len(store),
            skipped_lines=reader.skipped_lines,
            duration=max(store.duration, 0.0),
            size_bytes=path.stat().st_size,
        )

    logger.debug(
        f"{info.file_name}: {info.total_frames} frames, "
        f"{info.duration_formatted}, {info.size_formatted}"
    )
    return info
