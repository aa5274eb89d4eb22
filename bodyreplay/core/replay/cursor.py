"""
Core Replay Cursor - 回放游标

将拖动位置映射到帧存储索引，按速度推进，并检测流结束。
"""

from typing import Optional

from .message import FrameRecord, PlaybackSpeed
from .store import FrameStore


class PlaybackCursor:
    """
    回放游标

    position 与帧存储索引一一对应；暂停时由调用方停止 advance()，
    外部拖动通过 seek() 直接改变位置。
    """

    def __init__(self, store: Optional[FrameStore] = None, position: float = 0.0):
        self.store = store if store is not None else FrameStore()
        self.position = float(position)

    def bind(self, store: FrameStore, position: float = 0.0) -> None:
        """绑定新加载的帧存储并重置位置"""
        self.store = store
        self.position = float(position)

    def reset(self, position: float = 0.0) -> None:
        self.position = float(position)

    def seek(self, position: float) -> float:
        """直接跳转（不做范围限制，超出范围由 lookup 报告结束）"""
        self.position = float(position)
        return self.position

    def advance(self, speed: PlaybackSpeed) -> float:
        """按速度推进一个 tick"""
        self.position += speed.value
        return self.position

    def is_past_end(self, position: Optional[float] = None) -> bool:
        """位置是否超出已加载范围"""
        pos = self.position if position is None else position
        return not self.store.in_range(pos)

    def lookup(self, position: Optional[float] = None) -> Optional[FrameRecord]:
        """精确查找当前位置的帧

        超出范围或该位置没有记录时返回 None。
        """
        pos = self.position if position is None else position
        if self.is_past_end(pos):
            return None
        return self.store.get(pos)

    @property
    def progress(self) -> float:
        """回放进度 0.0 ~ 1.0"""
        max_key = self.store.max_key
        if not max_key:
            return 0.0
        return min(max(self.position / max_key, 0.0), 1.0)
