import json
import time

from clipboard_worker import ClipboardWorker
from conftest import FakeClipboard
from history_manager import HistoryManager


def make_worker(manager, content=None):
    return ClipboardWorker(manager, FakeClipboard(content), poll_interval=0.01)


def contents(manager):
    return [e.content for e in manager.get_copy()]


def test_tick_captures_new_content(manager):
    worker = make_worker(manager, "hello")
    assert worker.tick() is True
    assert contents(manager) == ["hello"]


def test_tick_ignores_unchanged_clipboard(manager):
    worker = make_worker(manager, "hello")
    worker.tick()
    version = manager.version
    assert worker.tick() is False
    assert manager.version == version


def test_tick_with_unavailable_clipboard_does_nothing(manager):
    worker = make_worker(manager, None)
    assert worker.tick() is False
    assert manager.get_length() == 0


def test_tick_captures_empty_and_whitespace_values(manager):
    worker = make_worker(manager, "")
    worker.tick()
    worker.clipboard.content = "  "
    worker.tick()
    assert contents(manager) == ["  ", ""]


def test_tick_promotes_previous_content(manager):
    worker = make_worker(manager, "a")
    worker.tick()
    worker.clipboard.content = "b"
    worker.tick()
    worker.clipboard.content = "a"
    worker.tick()
    assert contents(manager) == ["a", "b"]


def test_deleted_entry_still_on_clipboard_is_not_recaptured(manager):
    worker = make_worker(manager, "secret")
    worker.tick()
    manager.remove(manager.get_copy()[0].id)
    worker.tick()
    assert manager.get_length() == 0


def test_tick_saves_after_each_capture(manager, history_file):
    worker = make_worker(manager, "a")
    worker.tick()
    data = json.loads(history_file.read_text(encoding="utf-8"))
    assert [e["content"] for e in data["entries"]] == ["a"]
    assert not manager.dirty


def test_tick_survives_save_failure(tmp_path):
    target = tmp_path / "history.json"
    target.mkdir()
    manager = HistoryManager(5, target)
    worker = make_worker(manager, "a")
    assert worker.tick() is True
    assert manager.dirty


def test_thread_polls_until_stopped(manager):
    worker = make_worker(manager, "from thread")
    worker.start()
    try:
        for _ in range(200):
            if manager.get_length():
                break
            time.sleep(0.01)
    finally:
        worker.stop(timeout=2)
    assert not worker.is_alive()
    assert contents(manager) == ["from thread"]


def test_thread_keeps_running_after_tick_error(manager):
    class BrokenClipboard:
        calls = 0

        def read(self):
            BrokenClipboard.calls += 1
            raise RuntimeError("boom")

    worker = ClipboardWorker(manager, BrokenClipboard(), poll_interval=0.01)
    worker.start()
    try:
        for _ in range(200):
            if BrokenClipboard.calls >= 2:
                break
            time.sleep(0.01)
    finally:
        worker.stop(timeout=2)
    assert BrokenClipboard.calls >= 2


def test_tick_persists_surrogate_content(manager, history_file):
    worker = make_worker(manager, "\ud83d")
    assert worker.tick() is True
    assert not manager.dirty
    assert [e.content for e in HistoryManager(5, history_file).get_copy()] == ["\ud83d"]
