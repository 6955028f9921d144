"""
终端菜单的状态机

Browsing  -- 浏览全部历史（初始状态）
Searching -- 按查询过滤历史，每次按键重新计算
Exiting   -- 停止轮询、保存历史后结束

选中项按条目 id 跟踪，列表变化后仍停留在同一条目上；
条目离开视图时把原来的下标夹到新视图范围内。上下移动不循环。
复制后保持在当前状态，不自动退出。
"""
import enum
import logging

from config import PAGE_SIZE
from errors import ClipboardError, EntryNotFound, HistoryIOError
from hotkeys import DEFAULT_HOTKEYS, Action
from search import filter_entries

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    BROWSING = "browsing"
    SEARCHING = "searching"
    EXITING = "exiting"


class MenuController:
    def __init__(self, history_manager, clipboard, display, hotkeys=None, poller=None,
                 page_size=PAGE_SIZE):
        self.history_manager = history_manager
        self.clipboard = clipboard
        self.display = display
        self.hotkeys = dict(DEFAULT_HOTKEYS if hotkeys is None else hotkeys)
        self.poller = poller
        self.page_size = page_size

        self.mode = Mode.BROWSING
        self.query = ""
        self.view = []
        self.selected = None
        self.selected_id = None
        self.message = ""
        self._clear_armed = False

        self._actions = {
            Action.NAVIGATE_UP: lambda: self._move(-1),
            Action.NAVIGATE_DOWN: lambda: self._move(1),
            Action.PAGE_UP: lambda: self._move(-self.page_size),
            Action.PAGE_DOWN: lambda: self._move(self.page_size),
            Action.JUMP_TOP: lambda: self._move_to(0),
            Action.JUMP_BOTTOM: lambda: self._move_to(len(self.view) - 1),
            Action.SELECT: self.paste_selected,
            Action.BEGIN_SEARCH: self.begin_search,
            Action.ESCAPE: self.escape,
            Action.DELETE: self.delete_selected,
            Action.QUIT: self.shutdown,
        }
        self.refresh()

    # ---------------- 视图与选中项 ----------------

    @property
    def selected_entry(self):
        if self.selected is None:
            return None
        return self.view[self.selected]

    def refresh(self):
        """按当前历史和查询重新计算视图"""
        entries = self.history_manager.get_copy()
        query = self.query if self.mode is Mode.SEARCHING else ""
        self.view = filter_entries(entries, query)
        self._reselect()

    def _reselect(self):
        if not self.view:
            self.selected = None
            self.selected_id = None
            return
        if self.selected_id is not None:
            for i, entry in enumerate(self.view):
                if entry.id == self.selected_id:
                    self.selected = i
                    return
        self._move_to(self.selected or 0)

    def _move_to(self, index):
        if not self.view:
            return
        self.selected = max(0, min(index, len(self.view) - 1))
        self.selected_id = self.view[self.selected].id

    def _move(self, delta):
        if self.selected is None:
            return
        self._move_to(self.selected + delta)

    def _reset_selection(self):
        self.selected = None
        self.selected_id = None

    # ---------------- 按键分发 ----------------

    def handle_key(self, key):
        """处理一个符号键名；未绑定的键直接忽略"""
        if self.mode is Mode.EXITING:
            return
        clear_armed, self._clear_armed = self._clear_armed, False
        self.message = ""

        if self.mode is Mode.SEARCHING:
            if len(key) == 1 and key.isprintable():
                self.query += key
                self._reset_selection()
                self.refresh()
                return
            if key == "backspace":
                self.query = self.query[:-1]
                self._reset_selection()
                self.refresh()
                return

        action = self.hotkeys.get(key)
        if action is None:
            logger.debug("未绑定的按键: %r", key)
            return
        if action is Action.CLEAR_HISTORY:
            self.clear_history(confirmed=clear_armed)
            return
        self._actions[action]()

    def begin_search(self):
        if self.mode is not Mode.BROWSING:
            return
        self.mode = Mode.SEARCHING
        self.query = ""
        self._reset_selection()
        self.refresh()

    def escape(self):
        if self.mode is not Mode.SEARCHING:
            return
        # 丢弃查询，回到完整历史，选中项保持在原条目上
        self.mode = Mode.BROWSING
        self.query = ""
        self.refresh()

    # ---------------- 对历史的操作 ----------------

    def paste_selected(self):
        entry = self.selected_entry
        if entry is None:
            self.message = "没有可复制的条目"
            return False
        try:
            self.clipboard.write(entry.content)
        except ClipboardError as e:
            logger.warning("复制到剪贴板失败: %s", e)
            self.message = f"复制失败: {e}"
            return False
        self.message = "已复制到剪贴板"
        return True

    def delete_selected(self):
        entry = self.selected_entry
        if entry is None:
            return
        try:
            self.history_manager.remove(entry.id)
        except EntryNotFound:
            logger.info("条目 %s 已不存在", entry.id)
            self.message = "条目已不存在"
        else:
            self.message = "已删除"
            self._checkpoint()
        self.refresh()

    def clear_history(self, confirmed=False):
        """需要连续按两次才会清空，第一次只给出提示"""
        if not confirmed:
            self._clear_armed = True
            self.message = "再按一次以清空全部历史"
            return
        self.history_manager.clear()
        self.message = "历史已清空"
        self._checkpoint()
        self._reset_selection()
        self.refresh()

    def _checkpoint(self):
        try:
            self.history_manager.save()
        except HistoryIOError as e:
            logger.error("保存历史记录失败: %s", e)
            self.message = f"保存失败: {e}"

    def shutdown(self):
        """进入 Exiting：先停止轮询，再做最后一次保存"""
        if self.mode is Mode.EXITING:
            return
        self.mode = Mode.EXITING
        if self.poller is not None:
            self.poller.stop()
        try:
            self.history_manager.save()
        except HistoryIOError as e:
            logger.error("退出时保存历史记录失败: %s", e)

    # ---------------- 主循环 ----------------

    def render(self):
        self.display.render(self.view, self.selected, self.mode, self.message, query=self.query)

    def run(self):
        while self.mode is not Mode.EXITING:
            self.refresh()
            self.render()
            key = self.display.read_key()
            if key is not None:
                self.handle_key(key)
