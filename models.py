import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime


def now_timestamp():
    return datetime.now().isoformat(timespec="microseconds")


def _new_id():
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Entry:
    """一条剪贴板历史记录，content 保持原样，不做任何裁剪。"""
    content: str
    timestamp: str = field(default_factory=now_timestamp)
    id: str = field(default_factory=_new_id)

    @property
    def is_blank(self):
        return self.content.strip() == ""

    def display_time(self):
        try:
            return datetime.fromisoformat(self.timestamp).strftime("%Y-%m-%d %H:%M:%S")
        except ValueError:
            return self.timestamp

    def to_dict(self):
        return asdict(self)

    @staticmethod
    def from_dict(data):
        return Entry(
            content=data["content"],
            timestamp=data["timestamp"],
            id=data["id"],
        )
