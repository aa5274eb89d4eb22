#!/usr/bin/env python3
"""
bodyreplay 录制回放工具

使用方法:
    # 录制 300 个 tick 的合成骨骼数据
    bodyreplay record BodyRecording.txt --ticks 300

    # 回放（slow / normal / fast）
    bodyreplay play BodyRecording.txt --speed slow

    # 查看录制文件信息
    bodyreplay info BodyRecording.txt
"""

import argparse
import logging
import sys
from typing import List, Optional

from ..config import DEFAULT_LOG_LEVEL, DEFAULT_TICK_INTERVAL, setup_logging
from ..core.errors import RecordingIOError
from ..core.replay import (
    PlaybackSpeed,
    PlayerConfig,
    RecorderPlayer,
    TickDriver,
    inspect_recording,
)
from ..services.file_selection import FileSelection
from ..services.sensor import SyntheticBodySource
from ..services.status import LoggingStatusReporter

logger = logging.getLogger("BodyReplay")


class Colors:
    """ANSI 颜色代码"""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"

    @classmethod
    def success(cls, text: str) -> str:
        return f"{cls.GREEN}{text}{cls.RESET}"

    @classmethod
    def warning(cls, text: str) -> str:
        return f"{cls.YELLOW}{text}{cls.RESET}"

    @classmethod
    def error(cls, text: str) -> str:
        return f"{cls.RED}{text}{cls.RESET}"

    @classmethod
    def info(cls, text: str) -> str:
        return f"{cls.CYAN}{text}{cls.RESET}"


def _build_player(path: str, sensor: SyntheticBodySource, speed: PlaybackSpeed) -> RecorderPlayer:
    config = PlayerConfig(recording_path=path, speed=speed)
    return RecorderPlayer(
        config,
        sensor=sensor,
        files=FileSelection(path),
        status=LoggingStatusReporter(level=logging.DEBUG),
    )


def cmd_record(args: argparse.Namespace) -> int:
    """录制合成骨骼数据"""
    sensor = SyntheticBodySource(joint_count=args.joints)
    with _build_player(args.path, sensor, PlaybackSpeed.NORMAL) as player:
        if not player.start_recording():
            print(Colors.error(f"无法开始录制: {args.path}"))
            return 1

        print(Colors.success(f"● 开始录制: {args.path}"))
        driver = TickDriver(player, interval=args.interval)
        try:
            driver.run(max_ticks=args.ticks)
        except KeyboardInterrupt:
            print(Colors.warning("\n录制被中断"))

        summary = player.stop()

    if summary:
        print(Colors.success(f"■ 停止录制: {summary['frames']} 帧, {summary['duration']:.3f}s"))
    return 0


def cmd_play(args: argparse.Namespace) -> int:
    """回放录制文件"""
    frames_seen = []

    def on_frame(payload: str) -> None:
        frames_seen.append(payload)
        if args.verbose:
            print(f"  {len(frames_seen):5d}: {payload[:60]}")

    sensor = SyntheticBodySource(on_frame=on_frame)
    speed = PlaybackSpeed.from_name(args.speed)
    with _build_player(args.path, sensor, speed) as player:
        if not player.start_playing():
            print(Colors.error(f"无法回放: {args.path}"))
            return 1

        print(Colors.success(f"▶ 开始回放: {args.path} ({len(player.store)} 帧, {speed.label})"))
        driver = TickDriver(player, interval=args.interval)
        try:
            driver.run()
        except KeyboardInterrupt:
            print(Colors.warning("\n回放被中断"))
            player.stop()

    print(Colors.success(f"■ 回放结束: 已发送 {len(frames_seen)} 帧"))
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """显示录制文件信息"""
    try:
        info = inspect_recording(args.path)
    except RecordingIOError as e:
        print(Colors.error(e.message))
        return 1

    print(Colors.info("=" * 50))
    print(f"  文件: {info.file_name}")
    print(f"  数据源数量: {info.source_count if info.source_count is not None else '未知'}")
    print(f"  帧数: {info.total_frames}")
    print(f"  跳过行数: {info.skipped_lines}")
    print(f"  持续时间: {info.duration_formatted} ({info.duration:.3f}s)")
    print(f"  平均帧率: {info.average_fps:.1f} fps")
    print(f"  大小: {info.size_formatted}")
    print(Colors.info("=" * 50))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bodyreplay",
        description="骨骼帧数据录制回放工具",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  bodyreplay record take1.txt --ticks 300   # 录制 300 个 tick
  bodyreplay play take1.txt --speed fast    # 快速回放
  bodyreplay info take1.txt                 # 文件信息
        """,
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        help=f"日志级别 (默认: {DEFAULT_LOG_LEVEL})",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    record = sub.add_parser("record", help="录制合成骨骼数据")
    record.add_argument("path", help="录制文件路径")
    record.add_argument("--ticks", "-n", type=int, default=300, help="tick 数 (默认: 300)")
    record.add_argument("--joints", "-j", type=int, default=25, help="关节数 (默认: 25)")
    record.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_TICK_INTERVAL,
        help=f"tick 间隔秒数 (默认: {DEFAULT_TICK_INTERVAL})",
    )
    record.set_defaults(func=cmd_record)

    play = sub.add_parser("play", help="回放录制文件")
    play.add_argument("path", help="录制文件路径")
    play.add_argument(
        "--speed",
        "-s",
        choices=["slow", "normal", "fast"],
        default="normal",
        help="回放速度 (默认: normal)",
    )
    play.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_TICK_INTERVAL,
        help=f"tick 间隔秒数 (默认: {DEFAULT_TICK_INTERVAL})",
    )
    play.add_argument("--verbose", "-v", action="store_true", help="打印每一帧")
    play.set_defaults(func=cmd_play)

    info = sub.add_parser("info", help="显示录制文件信息")
    info.add_argument("path", help="录制文件路径")
    info.set_defaults(func=cmd_info)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
