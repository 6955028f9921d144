# 配置与常量定义
import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

from hotkeys import DEFAULT_HOTKEYS, parse_hotkeys

logger = logging.getLogger(__name__)

MAX_ITEMS = 200          # 历史最大条数
POLL_INTERVAL = 0.3      # 剪贴板轮询间隔（秒）
INPUT_TIMEOUT_MS = 50    # 终端按键等待超时（毫秒），决定界面刷新频率
PAGE_SIZE = 10           # 翻页移动的条数

# Linux: ~/.config/clipman，macOS: ~/Library/Application Support/clipman，Windows: %APPDATA%\clipman
DATA_DIR = Path(os.environ.get("CLIPMAN_HOME") or user_config_dir("clipman", appauthor=False, roaming=True))

CONFIG_FILE = DATA_DIR / "config.json"    # 用户配置文件
HISTORY_FILE = DATA_DIR / "history.json"  # 历史记录文件
LOG_FILE = DATA_DIR / "clipman.log"       # 日志文件

KNOWN_KEYS = {"max_history", "poll_interval_ms", "history_file", "hotkeys"}


def _positive_int(raw, name, default):
    if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
        logger.warning("配置项 %s 的值 %r 无效，使用默认值 %r", name, raw, default)
        return default
    return raw


def default_config():
    return {
        "max_history": MAX_ITEMS,
        "poll_interval": POLL_INTERVAL,
        "history_file": HISTORY_FILE,
        "hotkeys": dict(DEFAULT_HOTKEYS),
    }


def load_config(path=CONFIG_FILE):
    """读取 JSON 配置；文件缺失或内容错误时使用默认值，从不中断启动"""
    config = default_config()
    path = Path(path)
    if not path.exists():
        return config

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("读取配置文件 %s 失败: %s，使用默认配置", path, e)
        return config
    if not isinstance(data, dict):
        logger.warning("配置文件 %s 顶层必须是对象，使用默认配置", path)
        return config

    for key in sorted(data.keys() - KNOWN_KEYS):
        logger.warning("未知配置项 %r，已忽略", key)

    if "max_history" in data:
        config["max_history"] = _positive_int(data["max_history"], "max_history", MAX_ITEMS)
    if "poll_interval_ms" in data:
        interval_ms = _positive_int(data["poll_interval_ms"], "poll_interval_ms", int(POLL_INTERVAL * 1000))
        config["poll_interval"] = interval_ms / 1000
    if "history_file" in data:
        if isinstance(data["history_file"], str) and data["history_file"].strip():
            config["history_file"] = Path(data["history_file"]).expanduser()
        else:
            logger.warning("配置项 history_file 的值 %r 无效，使用默认值", data["history_file"])
    if "hotkeys" in data:
        config["hotkeys"] = parse_hotkeys(data["hotkeys"])
    return config
