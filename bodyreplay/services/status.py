"""
Status Reporter - 状态上报

传输状态机在状态变化、每个活动 tick 和错误时调用 publish(text)。
上报不能阻塞，也不能因异常影响传输状态。
"""

import logging
from collections import deque
from typing import Callable, Deque, List, Optional, Protocol

logger = logging.getLogger(__name__)


class StatusReporter(Protocol):
    """状态上报接口"""

    def publish(self, text: str) -> None:
        ...


class LoggingStatusReporter:
    """将状态文本写入日志"""

    def __init__(self, name: str = "bodyreplay.status", level: int = logging.INFO):
        self._logger = logging.getLogger(name)
        self._level = level

    def publish(self, text: str) -> None:
        self._logger.log(self._level, text)


class TextStatusReporter:
    """
    文本状态上报器

    保存当前文本和最近的历史，相当于界面上的信息文本框。
    可选的 on_change 回调在文本变化时调用。
    """

    def __init__(
        self,
        history: int = 50,
        on_change: Optional[Callable[[str], None]] = None,
    ):
        self.text = ""
        self._history: Deque[str] = deque(maxlen=history)
        self._on_change = on_change

    def publish(self, text: str) -> None:
        self.text = text
        self._history.append(text)
        if self._on_change:
            self._on_change(text)

    @property
    def history(self) -> List[str]:
        return list(self._history)

    def clear(self) -> None:
        self.text = ""
        self._history.clear()


def publish_safely(reporter: Optional[StatusReporter], text: str) -> None:
    """调用上报器，吞掉并记录异常"""
    if reporter is None:
        return
    try:
        reporter.publish(text)
    except Exception as e:
        logger.error(f"Status reporter error: {e}")
