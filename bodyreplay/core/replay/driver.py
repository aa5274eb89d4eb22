"""
Core Replay Driver - 固定步长 tick 驱动

按固定间隔调用 RecorderPlayer.tick()，尽力而为的节拍，不保证帧级实时。
"""

import logging
import time
from typing import Callable, Optional

from .transport import RecorderPlayer

logger = logging.getLogger(__name__)


class TickDriver:
    """固定步长驱动器"""

    def __init__(
        self,
        player: RecorderPlayer,
        interval: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.player = player
        self.interval = player.config.tick_interval if interval is None else interval
        self._sleep = sleep
        self._clock = clock
        self._running = False
        self.ticks = 0
        self.overruns = 0

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """在下一个 tick 前退出 run()"""
        self._running = False

    def run(self, max_ticks: Optional[int] = None, stop_when_idle: bool = True) -> int:
        """
        运行 tick 循环

        Args:
            max_ticks: 最大 tick 数（None 表示不限）
            stop_when_idle: 传输回到 IDLE 时退出

        Returns:
            本次运行的 tick 数
        """
        self._running = True
        count = 0
        next_deadline = self._clock()

        try:
            while self._running:
                if stop_when_idle and not self.player.is_active:
                    break
                if max_ticks is not None and count >= max_ticks:
                    break

                self.player.tick()
                count += 1
                self.ticks += 1

                if self.interval <= 0:
                    continue

                next_deadline += self.interval
                delay = next_deadline - self._clock()
                if delay > 0:
                    self._sleep(delay)
                else:
                    # 落后时不追赶，从当前时间重新计时
                    self.overruns += 1
                    next_deadline = self._clock()
        finally:
            self._running = False

        logger.debug(f"Tick loop finished after {count} ticks ({self.overruns} overruns)")
        return count
