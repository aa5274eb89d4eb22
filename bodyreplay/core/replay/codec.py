"""
Core Replay Codec - 录制文件编解码

录制文件格式（按行）:
    第 1 行: 数据源数量（整数）
    第 N 行: <相对时间, 3 位小数>|<帧负载>

- 写入: 每帧一次 open/append/close，保证每帧落盘
- 读取: 回放期间持有一个读句柄，跳过格式错误的行
"""

import logging
from pathlib import Path
from typing import IO, Iterator, List, Optional, Union

from ..errors import RecordFormatError, RecordingIOError
from .message import RECORD_DELIMITER, FrameRecord, split_record
from .store import FrameStore

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def format_record_line(relative_time: float, payload: str) -> str:
    """格式化一行记录（不含换行符）

    Python 的浮点格式化与 locale 无关，文件在任何机器上都一致。
    """
    if "\n" in payload or "\r" in payload:
        raise RecordFormatError(payload, "payload contains a line break")
    return f"{relative_time:.3f}{RECORD_DELIMITER}{payload}"


def parse_record_line(line: str, key: float) -> FrameRecord:
    """解析一行记录

    Args:
        line: 去掉换行符的记录行
        key: 分配给该行的合成索引

    Raises:
        RecordFormatError: 分隔后不足两段
    """
    parts = split_record(line)
    if parts is None:
        raise RecordFormatError(line, "missing delimiter")

    time_text, payload = parts
    try:
        relative_time = float(time_text)
    except ValueError:
        # 索引按行序分配，不依赖存储的时间
        logger.debug(f"Unparseable timestamp {time_text!r}, keeping line as frame {key:g}")
        relative_time = 0.0

    return FrameRecord(key=key, relative_time=relative_time, payload=payload)


def parse_header(line: Optional[str]) -> Optional[int]:
    """解析文件头中的数据源数量"""
    if line is None:
        return None
    try:
        return int(line.strip())
    except ValueError:
        logger.warning(f"Invalid recording header: {line.strip()!r}")
        return None


class RecordingWriter:
    """
    录制文件写入器

    不持有文件句柄：begin() 写文件头，append() 每次打开、写一行、关闭。
    """

    def __init__(self, path: PathLike):
        self.path = Path(path)
        self.frames_written = 0

    def begin(self, source_count: int) -> None:
        """删除旧文件并写入文件头"""
        try:
            if self.path.exists():
                self.path.unlink()
                logger.debug(f"Deleted previous recording {self.path}")
            with open(self.path, "a", encoding="utf-8", newline="\n") as f:
                f.write(f"{source_count}\n")
        except OSError as e:
            raise RecordingIOError(str(self.path), "cannot start recording", e) from e

        self.frames_written = 0

    def append(self, relative_time: float, payload: str) -> str:
        """追加一帧，返回写入的行"""
        line = format_record_line(relative_time, payload)
        try:
            with open(self.path, "a", encoding="utf-8", newline="\n") as f:
                f.write(line + "\n")
        except OSError as e:
            raise RecordingIOError(str(self.path), "cannot append frame", e) from e

        self.frames_written += 1
        return line


class RecordingReader:
    """
    录制文件读取器

    open() 之后持有读句柄，直到 close()。可作为上下文管理器使用。
    """

    def __init__(self, path: PathLike):
        self.path = Path(path)
        self.source_count: Optional[int] = None
        self.skipped_lines = 0
        self.total_lines = 0
        self._handle: Optional[IO[str]] = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> "RecordingReader":
        """打开文件"""
        if self._handle is not None:
            return self
        try:
            self._handle = open(self.path, "r", encoding="utf-8")
        except OSError as e:
            raise RecordingIOError(str(self.path), "cannot open recording", e) from e
        return self

    def close(self) -> None:
        """关闭文件（可重复调用）"""
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        handle.close()

    def __enter__(self) -> "RecordingReader":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def iter_frames(self) -> Iterator[FrameRecord]:
        """逐行解析记录，跳过文件头和格式错误的行"""
        if self._handle is None:
            raise RecordingIOError(str(self.path), "recording is not open")

        self._handle.seek(0)
        self.skipped_lines = 0
        self.total_lines = 0

        try:
            self.source_count = parse_header(self._handle.readline() or None)

            key = 0.0
            for raw in self._handle:
                line = raw.rstrip("\r\n")
                self.total_lines += 1
                try:
                    record = parse_record_line(line, key)
                except RecordFormatError as e:
                    self.skipped_lines += 1
                    logger.debug(f"Skipping line {self.total_lines + 1}: {e.message}")
                    continue
                yield record
                key += 1.0
        except (OSError, UnicodeDecodeError) as e:
            raise RecordingIOError(str(self.path), f"cannot read recording: {e}") from e

    def read_frames(self) -> List[FrameRecord]:
        """读取所有帧"""
        return list(self.iter_frames())

    def load_store(self) -> FrameStore:
        """读取并构建帧存储"""
        store = FrameStore.from_records(self.iter_frames())
        if self.skipped_lines:
            logger.warning(
                f"{self.path.name}: skipped {self.skipped_lines} malformed line(s)"
            )
        return store


def load_frame_store(path: PathLike) -> FrameStore:
    """打开、读取并关闭录制文件"""
    with RecordingReader(path) as reader:
        return reader.load_store()
