import curses
import logging

from config import INPUT_TIMEOUT_MS

logger = logging.getLogger(__name__)

_SPECIAL_KEYS = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_ENTER: "enter",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_DC: "delete",
    curses.KEY_IC: "insert",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_PPAGE: "pageup",
    curses.KEY_NPAGE: "pagedown",
}

_CONTROL_CHARS = {
    "\n": "enter",
    "\r": "enter",
    "\t": "tab",
    "\x1b": "escape",
    "\x7f": "backspace",
    "\x08": "backspace",
}

PREVIEW_LINES = 6


def translate_key(key):
    """把 get_wch() 的返回值转换成符号键名，无法识别时返回 None"""
    if isinstance(key, int):
        return _SPECIAL_KEYS.get(key)
    if key in _CONTROL_CHARS:
        return _CONTROL_CHARS[key]
    if len(key) == 1 and key.isprintable():
        return key
    return None


def format_entry_text(entry):
    """列表中单行显示的文本，不影响实际存储内容"""
    if entry.is_blank:
        return f"(whitespace: {entry.content!r})"
    text = entry.content.replace("\r\n", "\n")
    return "".join(_visible_char(ch) for ch in text)


def _visible_char(ch):
    # 控制字符不能直接交给 addnstr
    if ch in "\r\n":
        return "↵"
    if ch == "\t":
        return " "
    if not ch.isprintable():
        return "�"
    return ch


def format_entry_line(entry, width):
    line = f"[{entry.display_time()}] {format_entry_text(entry)}"
    if width <= 0:
        return ""
    if len(line) > width:
        line = line[:max(width - 3, 0)] + "..."
    return line[:width]


def format_title(mode_name, view_len, query):
    if mode_name == "searching":
        return f"Search: {query}  ({view_len} matches)"
    return f"Clipboard History ({view_len} items)"


def preview_lines(entry, width, max_lines=PREVIEW_LINES):
    """选中条目的完整内容预览，按宽度折行"""
    if entry is None or width <= 0:
        return []
    if entry.is_blank:
        return [repr(entry.content)[:width]]
    lines = []
    for raw in entry.content.expandtabs(4).splitlines():
        raw = "".join(_visible_char(ch) for ch in raw)
        if not raw:
            lines.append("")
        while raw:
            lines.append(raw[:width])
            raw = raw[width:]
        if len(lines) >= max_lines:
            break
    return lines[:max_lines]


class CursesDisplay:
    def __init__(self, stdscr, timeout_ms=INPUT_TIMEOUT_MS):
        self.stdscr = stdscr
        self.top = 0
        curses.curs_set(0)
        stdscr.keypad(True)
        stdscr.timeout(timeout_ms)
        # 缩短 ESC 键的等待时间
        if hasattr(curses, "set_escdelay"):
            curses.set_escdelay(25)

    def read_key(self):
        try:
            key = self.stdscr.get_wch()
        except curses.error:
            return None
        if key == curses.KEY_RESIZE:
            return None
        return translate_key(key)

    def render(self, view, selection, mode, message, query=""):
        height, width = self.stdscr.getmaxyx()
        self.stdscr.erase()

        selected = view[selection] if selection is not None else None
        preview = preview_lines(selected, width - 2)
        list_height = max(height - len(preview) - 4, 1)

        # 保证选中项在可见范围内
        if selection is not None:
            if selection < self.top:
                self.top = selection
            elif selection >= self.top + list_height:
                self.top = selection - list_height + 1
        self.top = max(0, min(self.top, max(len(view) - list_height, 0)))

        self._put(0, 0, format_title(mode.value, len(view), query), curses.A_BOLD)
        for row, entry in enumerate(view[self.top:self.top + list_height]):
            index = self.top + row
            prefix = ">> " if index == selection else "   "
            attr = curses.A_REVERSE if index == selection else curses.A_NORMAL
            self._put(row + 1, 0, prefix + format_entry_line(entry, width - 4), attr)

        preview_top = list_height + 1
        if preview:
            self._put(preview_top, 0, "─" * (width - 1), curses.A_DIM)
            for i, line in enumerate(preview):
                self._put(preview_top + 1 + i, 1, line)
        if message:
            self._put(height - 1, 0, message, curses.A_BOLD)
        self.stdscr.refresh()

    def _put(self, y, x, text, attr=curses.A_NORMAL):
        height, width = self.stdscr.getmaxyx()
        if y >= height or x >= width:
            return
        try:
            self.stdscr.addnstr(y, x, text, width - x - 1, attr)
        except curses.error:
            # 终端太小时写到边缘会报错，忽略即可
            logger.debug("绘制越界: y=%d x=%d", y, x)
