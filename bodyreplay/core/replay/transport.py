"""
Core Replay Transport - 录制回放传输状态机

状态: IDLE（初始/终止）、RECORDING、PLAYING（子状态：暂停/运行）

- 录制与回放互斥：开始其中一个会先停止另一个
- 固定步长 tick 驱动录制和回放，tick 之间不并发
- 写文件不跨 tick 持有句柄；读句柄在回放期间持有，任何退出路径都会释放
- 缺少文件等错误不致命：上报状态并保持 IDLE
"""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ...config import DEFAULT_RECORDING_PATH, DEFAULT_TICK_INTERVAL
from ...services.file_selection import FileSelection
from ...services.sensor import SensorSource
from ...services.status import LoggingStatusReporter, StatusReporter, publish_safely
from ..errors import (
    RecordFormatError,
    RecordingConfigError,
    RecordingIOError,
    StateConflictError,
)
from .codec import RecordingReader, RecordingWriter
from .cursor import PlaybackCursor
from .message import FrameRecord, PlaybackSpeed, TransportMode
from .session import SessionState
from .store import FrameStore

logger = logging.getLogger(__name__)

# 状态文本
DEFAULT_STATUS = "Select 'Record' to start the recorder, or 'Play' to start the player."
SENSOR_NOT_FOUND = "Sensor source not found, probably not initialized."
NO_FILE_TO_SAVE = "No file to save."
NO_FILE_TO_PLAY = "No file to play."
NO_FRAMES_TO_PLAY = "No frames to play."
RECORDING_STARTED = "Recording... Select 'Stop' to stop the recorder."
PLAYING_STARTED = "Playing... Select 'Stop' to stop the player."
RECORDING_STOPPED = "Recording stopped."
PLAYING_STOPPED = "Playing stopped."
PLAYBACK_PAUSED = "Playback paused."
PLAYBACK_RESUMED = "Playback resumed."

EVENTS = (
    "recording_started",
    "playing_started",
    "stopped",
    "frame_recorded",
    "frame_played",
    "end_of_stream",
)


@dataclass
class PlayerConfig:
    """录制回放器配置"""

    recording_path: str = DEFAULT_RECORDING_PATH
    tick_interval: float = DEFAULT_TICK_INTERVAL
    speed: PlaybackSpeed = PlaybackSpeed.NORMAL
    source_count: int = 1  # 文件头：数据源（传感器）数量
    play_at_start: bool = False  # 创建后立即开始回放


class RecorderPlayer:
    """
    录制回放器

    每个实例拥有唯一的 SessionState，创建时初始化，close() 时释放资源。

    使用示例：
    ```python
    player = RecorderPlayer(sensor=sensor, files=FileSelection("take1.txt"))

    @player.on("end_of_stream")
    def on_end():
        print("done")

    player.start_recording()
    for _ in range(100):
        player.tick()
    player.stop()

    player.start_playing()
    while player.is_playing():
        player.tick()
    player.close()
    ```
    """

    def __init__(
        self,
        config: Optional[PlayerConfig] = None,
        sensor: Optional[SensorSource] = None,
        files: Optional[FileSelection] = None,
        status: Optional[StatusReporter] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or PlayerConfig()
        self.sensor = sensor
        self.files = files if files is not None else FileSelection(self.config.recording_path)
        self.status = status if status is not None else LoggingStatusReporter()
        self._clock = clock

        self.state = SessionState(speed=self.config.speed)
        self.store = FrameStore()
        self.cursor = PlaybackCursor(self.store)

        self._writer: Optional[RecordingWriter] = None
        self._reader: Optional[RecordingReader] = None
        self.handlers: Dict[str, List[Callable]] = defaultdict(list)

        if self.sensor is None:
            logger.warning("Sensor source not found")
            self._publish(SENSOR_NOT_FOUND)
        else:
            self._publish(DEFAULT_STATUS)

    # ------------------------------------------------------------------
    # 事件
    # ------------------------------------------------------------------

    def on(self, event: str):
        """
        注册事件处理器（装饰器用法）

        事件类型:
        - "recording_started": (path)
        - "playing_started": (path, frame_count)
        - "stopped": (mode, summary)
        - "frame_recorded": (relative_time, payload)
        - "frame_played": (record)
        - "end_of_stream": ()
        """
        if event not in EVENTS:
            raise ValueError(f"Unknown event: {event}")

        def decorator(handler: Callable):
            self.handlers[event].append(handler)
            return handler

        return decorator

    def off(self, event: str, handler: Optional[Callable] = None) -> None:
        """移除事件处理器"""
        if handler:
            if handler in self.handlers[event]:
                self.handlers[event].remove(handler)
        else:
            self.handlers[event].clear()

    def _emit(self, event: str, *args: Any) -> None:
        for handler in list(self.handlers.get(event, [])):
            try:
                handler(*args)
            except Exception as e:
                logger.error(f"Handler error for {event}: {e}")

    def _publish(self, text: str) -> None:
        publish_safely(self.status, text)

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    @property
    def mode(self) -> TransportMode:
        return self.state.mode

    def is_recording(self) -> bool:
        return self.state.mode == TransportMode.RECORDING

    def is_playing(self) -> bool:
        return self.state.mode == TransportMode.PLAYING

    def is_paused(self) -> bool:
        return self.is_playing() and self.state.paused

    @property
    def is_active(self) -> bool:
        return self.state.mode != TransportMode.IDLE

    @property
    def position(self) -> float:
        """当前拖动位置"""
        return self.cursor.position

    @property
    def has_open_reader(self) -> bool:
        return self._reader is not None and self._reader.is_open

    # ------------------------------------------------------------------
    # 命令
    # ------------------------------------------------------------------

    def start_recording(self) -> bool:
        """开始录制"""
        if self.is_recording():
            logger.warning(StateConflictError("start_recording", self.mode.value).message)
            return False

        path = self.files.path
        if not path:
            error = RecordingConfigError(NO_FILE_TO_SAVE)
            logger.error(error.message)
            self._publish(NO_FILE_TO_SAVE)
            return False

        # 避免同时录制和回放
        if self.is_playing():
            logger.info("Stopping playback before recording")
            self.stop()

        writer = RecordingWriter(path)
        try:
            writer.begin(self.config.source_count)
        except RecordingIOError as e:
            logger.error(e.message)
            self._publish(f"Cannot record to {self.files.file_name}.")
            return False

        self._writer = writer
        now = self._clock()
        self.state.start_time = self.state.current_time = now
        self.state.current_frame = 0
        self.state.paused = False
        self.state.mode = TransportMode.RECORDING

        logger.info(f"Recording started: {path}")
        self._publish(RECORDING_STARTED)
        self._emit("recording_started", path)
        return True

    def start_playing(self, paused: bool = False) -> bool:
        """开始回放（每次都重新加载文件）"""
        if self.is_playing():
            logger.warning(StateConflictError("start_playing", self.mode.value).message)
            return False

        if self.is_recording():
            logger.info("Stopping recording before playback")
            self.stop()

        path = self.files.path
        if not path or not Path(path).is_file():
            logger.error(f"No file to play: {path!r}")
            self._publish(NO_FILE_TO_PLAY)
            return False

        reader = RecordingReader(path)
        try:
            reader.open()
            store = reader.load_store()
        except RecordingIOError as e:
            reader.close()
            logger.error(e.message)
            self._publish(NO_FILE_TO_PLAY)
            return False

        if not store:
            reader.close()
            logger.error(f"Recording has no frames: {path}")
            self._publish(NO_FRAMES_TO_PLAY)
            return False

        self._reader = reader
        self.store = store
        self.cursor.bind(store, store.min_key)

        self.state.start_time = self.state.current_time = 0.0
        self.state.current_frame = -1
        self.state.paused = paused
        self.state.mode = TransportMode.PLAYING

        self._notify_play_mode(True)

        logger.info(
            f"Playing started: {path}, {len(store)} frames, speed {self.state.speed.label}"
        )
        self._publish(PLAYING_STARTED)
        self._emit("playing_started", path, len(store))

        self._read_frame()
        return True

    def stop(self) -> Optional[Dict[str, Any]]:
        """停止录制或回放（可重复调用），返回会话摘要"""
        summary: Optional[Dict[str, Any]] = None
        mode = self.state.mode

        if mode == TransportMode.RECORDING:
            frames = self._writer.frames_written if self._writer else 0
            summary = {
                "mode": mode.value,
                "path": self.files.path,
                "frames": frames,
                "duration": self.state.relative_time,
            }
            self._writer = None
            self.state.reset()
            logger.info(f"Recording stopped: {frames} frames")
            self._publish(RECORDING_STOPPED)

        elif mode == TransportMode.PLAYING:
            summary = {
                "mode": mode.value,
                "path": self.files.path,
                "frames": self.state.current_frame + 1,
                "position": self.cursor.position,
            }
            self._release_reader()
            self._notify_play_mode(False)
            self.state.reset()
            logger.info(f"Playing stopped: {summary['frames']} frames played")
            self._publish(PLAYING_STOPPED)

        if summary is not None:
            self._emit("stopped", mode, summary)

        self._publish(DEFAULT_STATUS)
        return summary

    def toggle_pause(self) -> bool:
        """切换暂停/运行，返回是否暂停"""
        if not self.is_playing():
            logger.debug("Pause ignored: not playing")
            return False

        self.state.paused = not self.state.paused
        self._publish(PLAYBACK_PAUSED if self.state.paused else PLAYBACK_RESUMED)
        return self.state.paused

    def set_speed(self, speed: PlaybackSpeed) -> None:
        """设置回放速度，下一个 tick 生效"""
        self.state.speed = PlaybackSpeed(speed)
        logger.info(f"Playback speed set to {self.state.speed.label}")

    def set_speed_index(self, index: int) -> PlaybackSpeed:
        """速度下拉框变化"""
        speed = PlaybackSpeed.from_dropdown_index(index)
        self.set_speed(speed)
        return speed

    def seek(self, position: float) -> bool:
        """外部拖动：直接改变回放位置"""
        if not self.is_playing():
            logger.debug("Seek ignored: not playing")
            return False

        self.cursor.seek(position)
        self.state.current_time = self.cursor.position
        return True

    # ------------------------------------------------------------------
    # tick
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """固定步长处理"""
        if self.state.mode == TransportMode.RECORDING:
            self._record_tick()
        elif self.state.mode == TransportMode.PLAYING:
            self._play_tick()

    def _record_tick(self) -> None:
        if self.sensor is None or self._writer is None:
            return

        try:
            frame = self.sensor.produce_frame()
        except Exception as e:
            logger.error(f"Sensor error while recording: {e}")
            return

        if not frame:
            return
        frame_time, payload = frame
        if not payload:
            return

        # 传感器时间是相对录制开始的秒数；没有时间时按时钟计算
        if frame_time is None:
            relative_time = self._clock() - self.state.start_time
        else:
            relative_time = frame_time
        self.state.current_time = self.state.start_time + relative_time

        try:
            line = self._writer.append(relative_time, payload)
        except RecordFormatError as e:
            logger.warning(f"Frame not recorded: {e.message}")
            return
        except RecordingIOError as e:
            logger.error(e.message)
            self.stop()
            self._publish(f"Recording failed: {self.files.file_name}")
            return

        logger.debug(f"Recorded {line[:40]}")
        self._publish(
            f"Recording @ {relative_time:.3f}s, frame {self.state.current_frame}"
        )
        self.state.current_frame += 1
        self._emit("frame_recorded", relative_time, payload)

    def _play_tick(self) -> None:
        if not self.state.paused:
            self.cursor.advance(self.state.speed)
        self._read_frame()

    def _read_frame(self) -> Optional[FrameRecord]:
        """读取当前位置的帧并交给传感器；超出范围时结束回放"""
        self.state.current_time = self.cursor.position

        record = self.cursor.lookup()
        if record is None:
            if self.cursor.is_past_end():
                logger.info(f"End of stream at position {self.cursor.position:g}")
                self._emit("end_of_stream")
                self.stop()
            return None

        # 索引是精确匹配的，找到即到期
        self.state.current_frame += 1
        self._dispatch(record.payload)
        self._publish(
            f"Playing @ {record.relative_time_text}s, frame {self.state.current_frame}"
        )
        self._emit("frame_played", record)
        return record

    # ------------------------------------------------------------------
    # 传感器与资源
    # ------------------------------------------------------------------

    def _dispatch(self, payload: str) -> None:
        if self.sensor is None or not payload:
            return
        try:
            self.sensor.consume_frame(payload)
        except Exception as e:
            logger.error(f"Sensor error while playing: {e}")

    def _notify_play_mode(self, enabled: bool) -> None:
        if self.sensor is None:
            return
        try:
            self.sensor.set_play_mode_enabled(enabled)
        except Exception as e:
            logger.error(f"Sensor error switching play mode: {e}")

    def _release_reader(self) -> None:
        if self._reader is None:
            return
        reader, self._reader = self._reader, None
        try:
            reader.close()
        except OSError as e:
            logger.warning(f"Failed to close {reader.path}: {e}")

    def close(self) -> None:
        """释放资源并无条件回到 IDLE"""
        was_playing = self.is_playing()
        self._release_reader()
        if was_playing:
            self._notify_play_mode(False)
        self._writer = None
        self.state.reset()
        self.handlers.clear()
        logger.debug("Recorder/player closed")

    def __enter__(self) -> "RecorderPlayer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_recorder_player(
    path: Optional[str] = None,
    sensor: Optional[SensorSource] = None,
    status: Optional[StatusReporter] = None,
    config: Optional[PlayerConfig] = None,
    clock: Callable[[], float] = time.monotonic,
) -> RecorderPlayer:
    """
    快捷创建录制回放器

    Args:
        path: 录制/回放文件（默认使用配置中的路径）
        sensor: 传感器数据源
        status: 状态上报器
        config: 配置；play_at_start 为真时立即开始回放

    Returns:
        录制回放器
    """
    config = config or PlayerConfig()
    files = FileSelection(path if path is not None else config.recording_path)
    player = RecorderPlayer(config, sensor=sensor, files=files, status=status, clock=clock)
    if config.play_at_start:
        player.start_playing()
    return player
