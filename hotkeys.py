import enum
import logging
import re

logger = logging.getLogger(__name__)


class Action(enum.Enum):
    NAVIGATE_UP = "navigate_up"
    NAVIGATE_DOWN = "navigate_down"
    SELECT = "select"
    BEGIN_SEARCH = "begin_search"
    ESCAPE = "escape"
    DELETE = "delete"
    QUIT = "quit"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    JUMP_TOP = "jump_top"
    JUMP_BOTTOM = "jump_bottom"
    CLEAR_HISTORY = "clear_history"


# 终端层产生的符号键名；其余合法键为单个可打印字符
KEY_NAMES = {
    "up", "down", "left", "right", "enter", "escape", "backspace", "delete",
    "tab", "home", "end", "pageup", "pagedown", "insert",
}

DEFAULT_HOTKEYS = {
    "up": Action.NAVIGATE_UP,
    "k": Action.NAVIGATE_UP,
    "down": Action.NAVIGATE_DOWN,
    "j": Action.NAVIGATE_DOWN,
    "enter": Action.SELECT,
    "/": Action.BEGIN_SEARCH,
    "escape": Action.ESCAPE,
    "d": Action.DELETE,
    "delete": Action.DELETE,
    "q": Action.QUIT,
    "pageup": Action.PAGE_UP,
    "pagedown": Action.PAGE_DOWN,
    "home": Action.JUMP_TOP,
    "g": Action.JUMP_TOP,
    "end": Action.JUMP_BOTTOM,
    "G": Action.JUMP_BOTTOM,
    "C": Action.CLEAR_HISTORY,
}


def _normalize_action(name):
    # "NavigateUp" / "navigate-up" / "navigate_up" 都接受
    if not isinstance(name, str):
        raise ValueError(name)
    name = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", name.strip())
    return name.replace("-", "_").lower()


def is_valid_key(key):
    return key in KEY_NAMES or (len(key) == 1 and key.isprintable())


def parse_hotkeys(raw):
    """
    把配置中的 {键名: 动作名} 合并到默认热键上。
    无法识别的键名或动作名只记录警告并忽略。
    """
    hotkeys = dict(DEFAULT_HOTKEYS)
    if not raw:
        return hotkeys
    if not isinstance(raw, dict):
        logger.warning("热键配置必须是对象，已忽略: %r", raw)
        return hotkeys

    for key, action_name in raw.items():
        if not isinstance(key, str) or not is_valid_key(key):
            logger.warning("未知的键名 %r，已忽略", key)
            continue
        try:
            hotkeys[key] = Action(_normalize_action(action_name))
        except ValueError:
            logger.warning("键 %r 绑定了未知动作 %r，已忽略", key, action_name)
    return hotkeys
