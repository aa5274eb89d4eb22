"""
Replay Errors - 录制回放异常定义

所有录制/回放相关的异常都从 ReplayError 继承，
便于在命令边界统一捕获、记录日志并上报状态。
"""

from typing import Any, Dict, Optional


class ReplayError(Exception):
    """录制回放基础异常"""

    def __init__(
        self,
        message: str,
        code: str = "REPLAY_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class RecordingConfigError(ReplayError):
    """未配置录制/回放文件路径"""

    def __init__(self, message: str = "No file path configured"):
        super().__init__(message, code="CONFIG_ERROR")


class RecordingIOError(ReplayError):
    """文件不存在、不可读或无法删除"""

    def __init__(self, path: str, message: str, cause: Optional[OSError] = None):
        self.path = path
        details: Dict[str, Any] = {"path": path}
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(f"[File: {path}] {message}", code="IO_ERROR", details=details)


class RecordFormatError(ReplayError):
    """记录行格式错误（加载时跳过该行，而不是整个文件）"""

    def __init__(self, line: str, reason: str):
        self.line = line
        super().__init__(
            f"Malformed record: {reason}",
            code="FORMAT_ERROR",
            details={"line": line, "reason": reason},
        )


class StateConflictError(ReplayError):
    """命令与当前传输状态冲突"""

    def __init__(self, command: str, mode: str):
        self.command = command
        self.mode = mode
        super().__init__(
            f"Command '{command}' is not valid while {mode}",
            code="STATE_CONFLICT",
            details={"command": command, "mode": mode},
        )
