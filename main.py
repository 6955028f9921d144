import curses
import logging
import sys

from config import DATA_DIR, LOG_FILE, load_config
from errors import HistoryIOError
from history_manager import HistoryManager
from clipboard_io import PyperclipClipboard
from clipboard_worker import ClipboardWorker
from menu_controller import MenuController
from tui import CursesDisplay

logger = logging.getLogger(__name__)


def setup_logging(log_file=LOG_FILE, level=logging.INFO):
    """日志写入文件，终端由 curses 独占"""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_file),
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        encoding="utf-8",
    )


def main():
    try:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        setup_logging()
    except OSError as e:
        print(f"[ERROR] 无法创建数据目录 {DATA_DIR}: {e}", file=sys.stderr)
        sys.exit(1)

    # 初始化组件
    config = load_config()
    history_manager = HistoryManager(config["max_history"], config["history_file"])
    clipboard = PyperclipClipboard()

    # 启动剪贴板监听线程
    worker = ClipboardWorker(history_manager, clipboard, config["poll_interval"])
    worker.start()

    controller = None

    def run(stdscr):
        nonlocal controller
        display = CursesDisplay(stdscr)
        controller = MenuController(
            history_manager,
            clipboard,
            display,
            hotkeys=config["hotkeys"],
            poller=worker,
        )
        controller.run()

    try:
        curses.wrapper(run)
    except KeyboardInterrupt:
        logger.info("收到中断，退出中...")
    finally:
        if controller is not None:
            controller.shutdown()
        else:
            # 终端初始化失败时同样要先停轮询再保存
            worker.stop()
            try:
                history_manager.save()
            except HistoryIOError as e:
                logger.error("退出时保存历史记录失败: %s", e)
    logger.info("已退出")


if __name__ == "__main__":
    main()
