import logging

import pyperclip

from errors import ClipboardError

logger = logging.getLogger(__name__)


class PyperclipClipboard:
    """基于 pyperclip 的系统剪贴板读写"""

    def read(self):
        """返回当前剪贴板文本；剪贴板不可用时返回 None"""
        try:
            text = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            logger.debug("读取剪贴板失败: %s", e)
            return None
        if not isinstance(text, str):
            return None
        return text

    def write(self, text):
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"写入剪贴板失败: {e}") from e
