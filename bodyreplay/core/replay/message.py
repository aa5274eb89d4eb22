"""
Core Replay Message Types - 帧记录与枚举定义

基于 Pydantic 的帧记录类型。
帧负载对本模块是不透明的字符串，不做任何解析。
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# 录制文件中时间戳与负载之间的分隔符
RECORD_DELIMITER = "|"


class TransportMode(str, Enum):
    """传输状态"""

    IDLE = "idle"
    RECORDING = "recording"
    PLAYING = "playing"


class PlaybackSpeed(Enum):
    """回放速度（每个 tick 推进的拖动位置单位）"""

    SLOW = 1.0
    NORMAL = 2.0
    FAST = 3.0

    @classmethod
    def from_name(cls, name: str) -> "PlaybackSpeed":
        """从名称解析速度（slow / normal / fast）"""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown playback speed: {name!r}") from None

    @classmethod
    def from_dropdown_index(cls, index: int) -> "PlaybackSpeed":
        """速度下拉框索引映射：1 -> 慢速，2 -> 快速，其余 -> 正常"""
        if index == 1:
            return cls.SLOW
        if index == 2:
            return cls.FAST
        return cls.NORMAL

    @property
    def label(self) -> str:
        return f"{self.value:g}x"


class FrameRecord(BaseModel):
    """
    单帧记录

    key 是加载时按行序分配的合成索引（0.0, 1.0, ...），用作拖动定位；
    relative_time 保留文件中存储的相对时间，仅用于显示和统计。
    """

    key: float = Field(..., ge=0, description="合成帧索引")
    relative_time: float = Field(default=0.0, description="录制时的相对时间（秒）")
    payload: str = Field(..., description="帧负载")

    model_config = {"frozen": True}

    @field_validator("payload")
    @classmethod
    def reject_line_breaks(cls, v: str) -> str:
        """负载必须是单行文本"""
        if "\n" in v or "\r" in v:
            raise ValueError("payload must not contain line breaks")
        return v

    @property
    def index(self) -> int:
        """帧序号"""
        return int(self.key)

    @property
    def relative_time_text(self) -> str:
        """3 位小数的相对时间文本"""
        return f"{self.relative_time:.3f}"


def split_record(line: str) -> Optional[tuple]:
    """按第一个分隔符拆分记录行，不足两段时返回 None"""
    parts = line.split(RECORD_DELIMITER, 1)
    if len(parts) < 2:
        return None
    return parts[0], parts[1]
