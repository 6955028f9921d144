import logging
import threading

from errors import HistoryIOError

logger = logging.getLogger(__name__)


class ClipboardWorker(threading.Thread):
    def __init__(self, history_manager, clipboard, poll_interval, daemon=True):
        super().__init__(daemon=daemon, name="clipboard-worker")
        self.history_manager = history_manager
        self.clipboard = clipboard
        self.poll_interval = poll_interval
        self.last_data = None
        self._stop_event = threading.Event()
        self._read_failing = False

    def tick(self):
        """采样一次剪贴板，内容变化时写入历史；返回是否产生了修改"""
        text = self.clipboard.read()
        if text is None:
            if not self._read_failing:
                logger.warning("剪贴板暂不可用")
                self._read_failing = True
            return False
        self._read_failing = False

        # 只在剪贴板内容变化时记录，已删除但仍留在剪贴板中的内容不会被重新加入
        if text == self.last_data:
            return False
        self.last_data = text

        changed = self.history_manager.capture(text) is not None
        # 上次保存失败时 dirty 仍为 True，这里顺带重试
        try:
            self.history_manager.flush()
        except HistoryIOError as e:
            logger.error("保存历史记录失败: %s", e)
        return changed

    def run(self):
        """后台轮询剪贴板"""
        logger.info("剪贴板轮询启动，间隔 %.3f 秒", self.poll_interval)
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("剪贴板轮询出错")
            self._stop_event.wait(self.poll_interval)
        logger.info("剪贴板轮询已停止")

    def stop(self, timeout=None):
        """停止工作线程并等待其退出"""
        self._stop_event.set()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(timeout)
