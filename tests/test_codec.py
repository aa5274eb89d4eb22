"""
Codec Tests - 录制文件编解码测试

测试内容：
1. 记录行格式化与解析
2. 写入器（文件头、逐帧追加）
3. 读取器（跳过格式错误行、合成索引）
4. 录制 -> 加载往返
"""

import pytest
from pathlib import Path

# 添加路径
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from bodyreplay.core.errors import RecordFormatError, RecordingIOError
from bodyreplay.core.replay.codec import (
    RecordingReader,
    RecordingWriter,
    format_record_line,
    load_frame_store,
    parse_header,
    parse_record_line,
)


# ==================== Fixtures ====================

@pytest.fixture
def recording_path(tmp_path):
    """录制文件路径"""
    return tmp_path / "BodyRecording.txt"


@pytest.fixture
def written_recording(recording_path):
    """写好 3 帧的录制文件"""
    writer = RecordingWriter(recording_path)
    writer.begin(2)
    writer.append(0.0, "A")
    writer.append(0.0333, "B")
    writer.append(0.0667, "C")
    return recording_path


# ==================== Line Format Tests ====================

class TestRecordLine:
    """记录行测试"""

    def test_format_three_decimals(self):
        """测试固定 3 位小数"""
        assert format_record_line(1.23456, "x,y,z") == "1.235|x,y,z"
        assert format_record_line(0, "p") == "0.000|p"

    def test_format_rejects_line_break(self):
        """测试负载包含换行符"""
        with pytest.raises(RecordFormatError):
            format_record_line(0.5, "bad\npayload")

    def test_parse_line(self):
        """测试解析记录行"""
        record = parse_record_line("0.125|1,0.5,0.25", key=3.0)
        assert record.key == 3.0
        assert record.relative_time == pytest.approx(0.125)
        assert record.payload == "1,0.5,0.25"

    def test_parse_keeps_extra_delimiters_in_payload(self):
        """测试只按第一个分隔符拆分"""
        record = parse_record_line("1.000|a|b", key=0.0)
        assert record.payload == "a|b"

    def test_parse_missing_delimiter(self):
        """测试缺少分隔符"""
        with pytest.raises(RecordFormatError) as exc_info:
            parse_record_line("no delimiter here", key=0.0)
        assert exc_info.value.code == "FORMAT_ERROR"

    def test_parse_bad_timestamp_still_accepted(self):
        """测试时间戳无法解析时仍保留该行"""
        record = parse_record_line("n/a|payload", key=1.0)
        assert record.relative_time == 0.0
        assert record.payload == "payload"

    def test_parse_header(self):
        """测试文件头解析"""
        assert parse_header("2\n") == 2
        assert parse_header("kinect") is None
        assert parse_header(None) is None


# ==================== Writer Tests ====================

class TestRecordingWriter:
    """写入器测试"""

    def test_begin_writes_header(self, recording_path):
        """测试写入文件头"""
        RecordingWriter(recording_path).begin(1)
        assert recording_path.read_text(encoding="utf-8") == "1\n"

    def test_begin_deletes_previous_file(self, recording_path):
        """测试开始录制时删除旧文件"""
        recording_path.write_text("9\n0.000|old\n0.100|older\n", encoding="utf-8")
        writer = RecordingWriter(recording_path)
        writer.begin(1)
        writer.append(0.0, "new")
        assert recording_path.read_text(encoding="utf-8").splitlines() == ["1", "0.000|new"]

    def test_append_one_line_per_call(self, written_recording):
        """测试每次追加一行"""
        lines = written_recording.read_text(encoding="utf-8").splitlines()
        assert lines == ["2", "0.000|A", "0.033|B", "0.067|C"]

    def test_frames_written(self, recording_path):
        """测试帧计数"""
        writer = RecordingWriter(recording_path)
        writer.begin(1)
        for i in range(4):
            writer.append(i * 0.5, f"frame{i}")
        assert writer.frames_written == 4

    def test_begin_in_missing_directory(self, tmp_path):
        """测试目录不存在"""
        writer = RecordingWriter(tmp_path / "missing" / "rec.txt")
        with pytest.raises(RecordingIOError):
            writer.begin(1)


# ==================== Reader Tests ====================

class TestRecordingReader:
    """读取器测试"""

    def test_synthetic_keys(self, written_recording):
        """测试按行序分配索引"""
        with RecordingReader(written_recording) as reader:
            frames = reader.read_frames()
        assert [f.key for f in frames] == [0.0, 1.0, 2.0]
        assert [f.payload for f in frames] == ["A", "B", "C"]

    def test_source_count(self, written_recording):
        """测试读取文件头"""
        with RecordingReader(written_recording) as reader:
            reader.read_frames()
            assert reader.source_count == 2

    def test_skips_malformed_line(self, recording_path):
        """测试跳过缺少分隔符的行"""
        recording_path.write_text(
            "1\n0.000|A\ngarbage\n0.050|B\n0.100|C\n", encoding="utf-8"
        )
        with RecordingReader(recording_path) as reader:
            store = reader.load_store()
            assert reader.skipped_lines == 1
            assert reader.total_lines == 4
        assert len(store) == 3
        assert store.payloads() == ["A", "B", "C"]
        assert store.keys() == [0.0, 1.0, 2.0]

    def test_handle_held_until_close(self, written_recording):
        """测试读句柄在 close 前保持打开"""
        reader = RecordingReader(written_recording).open()
        reader.read_frames()
        assert reader.is_open is True
        reader.close()
        assert reader.is_open is False
        reader.close()

    def test_read_without_open(self, written_recording):
        """测试未打开时读取"""
        with pytest.raises(RecordingIOError):
            RecordingReader(written_recording).read_frames()

    def test_open_missing_file(self, tmp_path):
        """测试文件不存在"""
        with pytest.raises(RecordingIOError) as exc_info:
            RecordingReader(tmp_path / "nope.txt").open()
        assert exc_info.value.code == "IO_ERROR"

    def test_blank_line_counted_as_skipped(self, recording_path):
        """测试空行按格式错误计数"""
        recording_path.write_text("1\n0.000|A\n\n0.050|B\n", encoding="utf-8")
        with RecordingReader(recording_path) as reader:
            store = reader.load_store()
            assert reader.skipped_lines == 1
            assert reader.total_lines == 3
        assert store.payloads() == ["A", "B"]

    def test_header_only_file(self, recording_path):
        """测试只有文件头"""
        recording_path.write_text("1\n", encoding="utf-8")
        assert len(load_frame_store(recording_path)) == 0


# ==================== Round Trip ====================

class TestRoundTrip:
    """录制 -> 加载往返测试"""

    def test_order_and_payloads_preserved(self, recording_path):
        """测试顺序与负载保持一致"""
        frames = [(i / 30, f"1,{i},{i * 2},{i * 3}") for i in range(50)]
        writer = RecordingWriter(recording_path)
        writer.begin(1)
        for t, payload in frames:
            writer.append(t, payload)

        store = load_frame_store(recording_path)
        assert store.payloads() == [p for _, p in frames]
        assert store.keys() == [float(i) for i in range(50)]
        assert store.max_key == 49.0
