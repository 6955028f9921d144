import pytest

from errors import ClipboardError
from history_manager import HistoryManager
from menu_controller import MenuController


class FakeClipboard:
    def __init__(self, content=None):
        self.content = content
        self.writes = []
        self.fail_writes = False

    def read(self):
        return self.content

    def write(self, text):
        if self.fail_writes:
            raise ClipboardError("剪贴板被占用")
        self.writes.append(text)
        self.content = text


class FakeDisplay:
    """按顺序返回预设按键，用完后先退出搜索再按 q 退出"""

    def __init__(self, keys=()):
        self.keys = list(keys)
        self.frames = []

    def render(self, view, selection, mode, message, query=""):
        self.frames.append({
            "view": [e.content for e in view],
            "selection": selection,
            "mode": mode,
            "message": message,
            "query": query,
        })

    def read_key(self):
        if not self.keys:
            self.keys = ["escape", "q"]
        return self.keys.pop(0)


class FakePoller:
    def __init__(self, events=None):
        self.events = events if events is not None else []
        self.stopped = False

    def stop(self):
        self.stopped = True
        self.events.append("stop")


@pytest.fixture
def history_file(tmp_path):
    return tmp_path / "history.json"


@pytest.fixture
def manager(history_file):
    return HistoryManager(5, history_file)


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def make_controller(manager, clipboard, display):
    def factory(*contents, **kwargs):
        # 按顺序捕获，最后一个在最前
        for content in contents:
            manager.capture(content)
        return MenuController(manager, clipboard, display, **kwargs)
    return factory
