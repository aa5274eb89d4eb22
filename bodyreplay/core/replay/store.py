"""
Core Replay Frame Store - 帧存储

合成索引 -> 帧记录 的只读映射。每次加载构建一次，加载后不再修改。
"""

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from .message import FrameRecord


class FrameStore:
    """只读帧存储"""

    def __init__(self, frames: Optional[Mapping[float, FrameRecord]] = None):
        frames = dict(frames or {})
        self._keys: List[float] = sorted(frames)
        self._frames: Mapping[float, FrameRecord] = MappingProxyType(frames)

    @classmethod
    def from_records(cls, records: Iterable[FrameRecord]) -> "FrameStore":
        """从记录序列构建，索引必须严格递增"""
        frames: Dict[float, FrameRecord] = {}
        last_key: Optional[float] = None
        for record in records:
            if last_key is not None and record.key <= last_key:
                raise ValueError(
                    f"Frame keys must be strictly increasing ({record.key} after {last_key})"
                )
            frames[record.key] = record
            last_key = record.key
        return cls(frames)

    @classmethod
    def from_payloads(cls, payloads: Iterable[str], start: float = 0.0) -> "FrameStore":
        """按顺序为负载分配索引"""
        records = (
            FrameRecord(key=start + i, payload=payload)
            for i, payload in enumerate(payloads)
        )
        return cls.from_records(records)

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._frames

    def __iter__(self) -> Iterator[FrameRecord]:
        for key in self._keys:
            yield self._frames[key]

    @property
    def frames(self) -> Mapping[float, FrameRecord]:
        return self._frames

    @property
    def min_key(self) -> Optional[float]:
        return self._keys[0] if self._keys else None

    @property
    def max_key(self) -> Optional[float]:
        """回放范围上界"""
        return self._keys[-1] if self._keys else None

    def keys(self) -> List[float]:
        return list(self._keys)

    def payloads(self) -> List[str]:
        """按索引顺序的负载列表"""
        return [self._frames[key].payload for key in self._keys]

    def get(self, key: float) -> Optional[FrameRecord]:
        """精确索引查找"""
        return self._frames.get(key)

    def in_range(self, position: float) -> bool:
        """位置是否落在已加载范围内"""
        if not self._keys:
            return False
        return self._keys[0] <= position <= self._keys[-1]

    @property
    def duration(self) -> float:
        """最后一帧的相对时间"""
        if not self._keys:
            return 0.0
        return self._frames[self._keys[-1]].relative_time
