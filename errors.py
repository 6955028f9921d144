# 错误类型定义


class ClipmanError(Exception):
    """所有剪贴板历史相关错误的基类"""


class HistoryIOError(ClipmanError):
    """历史文件读写失败"""

    def __init__(self, path, cause):
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class HistoryFormatError(ClipmanError):
    """历史文件损坏或格式无法识别"""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class ClipboardError(ClipmanError):
    """系统剪贴板不可用或写入被拒绝"""


class EntryNotFound(ClipmanError):
    """引用了已不存在的条目"""

    def __init__(self, entry_id):
        super().__init__(f"条目不存在: {entry_id}")
        self.entry_id = entry_id
