"""
Sensor Sources - 传感器数据源

录制时每个 tick 调用 produce_frame()，回放时把到期的帧负载交给
consume_frame()，并通过 set_play_mode_enabled() 通知模式切换。
"""

import logging
import math
import time
from typing import Callable, Iterable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

# (相对录制开始的秒数, 负载)；负载为空表示本 tick 没有新帧
SensorFrame = Tuple[float, str]


class SensorSource(Protocol):
    """传感器数据源接口"""

    def produce_frame(self) -> Optional[SensorFrame]:
        ...

    def consume_frame(self, payload: str) -> None:
        ...

    def set_play_mode_enabled(self, enabled: bool) -> None:
        ...


class ScriptedSensorSource:
    """
    脚本化数据源

    按顺序返回预设的 (时间, 负载)，并记录回放时收到的负载。
    """

    def __init__(self, frames: Optional[Iterable[SensorFrame]] = None):
        self._frames: List[SensorFrame] = list(frames or [])
        self._index = 0
        self.consumed: List[str] = []
        self.play_mode_changes: List[bool] = []
        self.play_mode_enabled = False

    @classmethod
    def from_payloads(
        cls, payloads: Iterable[str], interval: float = 1.0 / 30, start: float = 0.0
    ) -> "ScriptedSensorSource":
        """按固定间隔为负载生成时间"""
        return cls((start + i * interval, p) for i, p in enumerate(payloads))

    @property
    def remaining(self) -> int:
        return len(self._frames) - self._index

    def produce_frame(self) -> Optional[SensorFrame]:
        if self._index >= len(self._frames):
            return None
        frame = self._frames[self._index]
        self._index += 1
        return frame

    def consume_frame(self, payload: str) -> None:
        self.consumed.append(payload)

    def set_play_mode_enabled(self, enabled: bool) -> None:
        self.play_mode_enabled = enabled
        self.play_mode_changes.append(enabled)


class SyntheticBodySource:
    """
    合成骨骼数据源

    生成逗号分隔的关节坐标字符串（x,y,z 每个关节），用于演示录制。
    帧时间是相对创建（或退出回放模式）时刻的秒数。
    回放时负载交给 on_frame 回调。
    """

    def __init__(
        self,
        joint_count: int = 25,
        clock: Callable[[], float] = time.monotonic,
        on_frame: Optional[Callable[[str], None]] = None,
    ):
        self.joint_count = joint_count
        self._clock = clock
        self._on_frame = on_frame
        self._start = clock()
        self.play_mode_enabled = False
        self.frames_produced = 0

    def _joints(self, t: float) -> str:
        values = []
        for j in range(self.joint_count):
            phase = t * 2.0 + j * 0.25
            values.extend(
                (
                    f"{math.sin(phase) * 0.5:.4f}",
                    f"{1.0 + j * 0.05 + math.cos(phase) * 0.1:.4f}",
                    f"{2.0 + math.sin(phase * 0.5) * 0.2:.4f}",
                )
            )
        return ",".join(values)

    def produce_frame(self) -> Optional[SensorFrame]:
        if self.play_mode_enabled:
            # 回放模式下不产生实时数据
            return None
        elapsed = self._clock() - self._start
        self.frames_produced += 1
        return elapsed, f"1,{self._joints(elapsed)}"

    def consume_frame(self, payload: str) -> None:
        if self._on_frame:
            self._on_frame(payload)

    def set_play_mode_enabled(self, enabled: bool) -> None:
        self.play_mode_enabled = enabled
        if not enabled:
            # 回到实时模式，重新计时
            self._start = self._clock()
        logger.debug(f"Play mode {'enabled' if enabled else 'disabled'}")
