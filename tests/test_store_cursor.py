"""
Store & Cursor Tests - 帧存储与回放游标测试
"""

import pytest
from pathlib import Path

# 添加路径
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from bodyreplay.core.replay.cursor import PlaybackCursor
from bodyreplay.core.replay.message import FrameRecord, PlaybackSpeed
from bodyreplay.core.replay.store import FrameStore


# ==================== Fixtures ====================

@pytest.fixture
def store():
    """5 帧存储 A..E"""
    return FrameStore.from_payloads(["A", "B", "C", "D", "E"])


@pytest.fixture
def cursor(store):
    return PlaybackCursor(store)


# ==================== Frame Record ====================

class TestFrameRecord:
    """帧记录测试"""

    def test_create(self):
        """测试创建帧记录"""
        record = FrameRecord(key=2.0, relative_time=0.0666, payload="x")
        assert record.index == 2
        assert record.relative_time_text == "0.067"

    def test_rejects_line_break(self):
        """测试负载包含换行符"""
        with pytest.raises(ValueError):
            FrameRecord(key=0.0, payload="a\nb")

    def test_frozen(self):
        """测试帧记录不可修改"""
        record = FrameRecord(key=0.0, payload="x")
        with pytest.raises(Exception):
            record.payload = "y"


# ==================== Frame Store ====================

class TestFrameStore:
    """帧存储测试"""

    def test_keys_and_range(self, store):
        """测试索引与范围"""
        assert len(store) == 5
        assert store.keys() == [0.0, 1.0, 2.0, 3.0, 4.0]
        assert store.min_key == 0.0
        assert store.max_key == 4.0

    def test_exact_lookup(self, store):
        """测试精确查找"""
        assert store.get(2.0).payload == "C"
        assert store.get(2.5) is None
        assert 4.0 in store

    def test_read_only(self, store):
        """测试加载后只读"""
        with pytest.raises(TypeError):
            store.frames[5.0] = FrameRecord(key=5.0, payload="F")

    def test_rejects_non_increasing_keys(self):
        """测试索引必须严格递增"""
        records = [
            FrameRecord(key=0.0, payload="A"),
            FrameRecord(key=0.0, payload="B"),
        ]
        with pytest.raises(ValueError):
            FrameStore.from_records(records)

    def test_empty_store(self):
        """测试空存储"""
        empty = FrameStore()
        assert not empty
        assert empty.max_key is None
        assert empty.in_range(0.0) is False
        assert empty.duration == 0.0

    def test_iteration_order(self, store):
        """测试按索引顺序迭代"""
        assert [r.payload for r in store] == ["A", "B", "C", "D", "E"]


# ==================== Playback Cursor ====================

class TestPlaybackCursor:
    """回放游标测试"""

    def test_lookup_at_start(self, cursor):
        """测试初始位置查找"""
        assert cursor.lookup().payload == "A"

    @pytest.mark.parametrize(
        "speed,expected",
        [(PlaybackSpeed.SLOW, 1.0), (PlaybackSpeed.NORMAL, 2.0), (PlaybackSpeed.FAST, 3.0)],
    )
    def test_advance_by_speed(self, cursor, speed, expected):
        """测试按速度推进"""
        assert cursor.advance(speed) == expected

    def test_lookup_past_end(self, cursor):
        """测试超出范围"""
        cursor.seek(5.0)
        assert cursor.lookup() is None
        assert cursor.is_past_end() is True

    def test_lookup_before_start(self, cursor):
        """测试负位置"""
        cursor.seek(-1.0)
        assert cursor.lookup() is None
        assert cursor.is_past_end() is True

    def test_fractional_position_inside_range(self, cursor):
        """测试范围内没有精确记录的位置"""
        cursor.seek(1.5)
        assert cursor.lookup() is None
        assert cursor.is_past_end() is False

    def test_bind_resets_position(self, cursor):
        """测试重新绑定存储"""
        cursor.seek(3.0)
        cursor.bind(FrameStore.from_payloads(["X", "Y"]))
        assert cursor.position == 0.0
        assert cursor.lookup().payload == "X"

    def test_progress(self, cursor):
        """测试进度"""
        cursor.seek(2.0)
        assert cursor.progress == pytest.approx(0.5)
        cursor.seek(10.0)
        assert cursor.progress == 1.0


# ==================== Speed ====================

class TestPlaybackSpeed:
    """回放速度枚举测试"""

    def test_values(self):
        assert PlaybackSpeed.SLOW.value == 1.0
        assert PlaybackSpeed.NORMAL.value == 2.0
        assert PlaybackSpeed.FAST.value == 3.0

    def test_dropdown_mapping(self):
        """测试下拉框索引映射"""
        assert PlaybackSpeed.from_dropdown_index(0) is PlaybackSpeed.NORMAL
        assert PlaybackSpeed.from_dropdown_index(1) is PlaybackSpeed.SLOW
        assert PlaybackSpeed.from_dropdown_index(2) is PlaybackSpeed.FAST
        assert PlaybackSpeed.from_dropdown_index(7) is PlaybackSpeed.NORMAL

    def test_from_name(self):
        assert PlaybackSpeed.from_name("Fast") is PlaybackSpeed.FAST
        with pytest.raises(ValueError):
            PlaybackSpeed.from_name("warp")

    def test_label(self):
        assert PlaybackSpeed.NORMAL.label == "2x"
