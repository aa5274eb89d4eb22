"""File Selection - 录制文件路径提供者"""

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class FileSelection:
    """
    录制/回放目标文件

    空路径表示"未配置"。file_name 用于状态显示。
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = str(path) if path else ""

    @property
    def path(self) -> str:
        return self._path

    @property
    def file_name(self) -> str:
        return Path(self._path).name if self._path else ""

    @property
    def is_configured(self) -> bool:
        return bool(self._path)

    @property
    def exists(self) -> bool:
        return self.is_configured and Path(self._path).is_file()

    @property
    def status_text(self) -> str:
        if not self.is_configured:
            return "No file selected."
        return f"File Selected: {self.file_name}"

    def select(self, path: Union[str, Path]) -> str:
        """选择文件，返回状态文本"""
        self._path = str(path) if path else ""
        logger.info(self.status_text)
        return self.status_text

    def clear(self) -> None:
        self._path = ""
