import pyperclip
import pytest

from clipboard_io import PyperclipClipboard
from errors import ClipboardError


def test_read_returns_text(monkeypatch):
    monkeypatch.setattr(pyperclip, "paste", lambda: "  spaced\n")
    assert PyperclipClipboard().read() == "  spaced\n"


def test_read_returns_none_when_unavailable(monkeypatch):
    def broken():
        raise pyperclip.PyperclipException("no clipboard mechanism")

    monkeypatch.setattr(pyperclip, "paste", broken)
    assert PyperclipClipboard().read() is None


def test_write_passes_text_through(monkeypatch):
    copied = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)
    PyperclipClipboard().write("\t")
    assert copied == ["\t"]


def test_write_failure_raises_clipboard_error(monkeypatch):
    def broken(text):
        raise pyperclip.PyperclipException("denied")

    monkeypatch.setattr(pyperclip, "copy", broken)
    with pytest.raises(ClipboardError):
        PyperclipClipboard().write("x")
