import dataclasses
import logging
import os
import threading

from errors import EntryNotFound, HistoryFormatError, HistoryIOError
from history_codec import load_history, save_history
from models import Entry, now_timestamp

logger = logging.getLogger(__name__)


class HistoryManager:
    def __init__(self, max_items, history_file=None):
        if max_items <= 0:
            raise ValueError("max_items 必须大于 0")
        self.max_items = max_items
        self.history_file = os.fspath(history_file) if history_file else None
        self.history = []
        self.history_lock = threading.Lock()
        # 快照、写盘、清除 dirty 在同一把锁内完成
        self._save_lock = threading.Lock()
        self.version = 0  # 用于检测更新
        self.dirty = False
        self._snapshot = ()
        if history_file:
            self.load()

    def _changed(self):
        # 调用方必须持有 history_lock
        self._snapshot = tuple(self.history)
        self.version += 1
        self.dirty = True

    def _next_timestamp(self):
        # 调用方必须持有 history_lock；时间戳从头到尾不递增，系统时钟回拨时沿用当前头部时间
        timestamp = now_timestamp()
        if self.history and self.history[0].timestamp > timestamp:
            return self.history[0].timestamp
        return timestamp

    def load(self):
        """加载历史记录；文件损坏时移到一边并从空历史开始"""
        try:
            entries = load_history(self.history_file)
        except HistoryFormatError as e:
            backup = self.history_file + ".corrupt"
            logger.warning("历史文件损坏 (%s)，已备份到 %s，使用空历史", e, backup)
            try:
                os.replace(self.history_file, backup)
            except OSError as move_err:
                logger.error("备份损坏的历史文件失败: %s", move_err)
            entries = []
        except HistoryIOError as e:
            logger.warning("加载历史失败: %s，使用空历史", e)
            entries = []

        with self.history_lock:
            self.history = entries[:self.max_items]
            self._snapshot = tuple(self.history)
            self.version += 1
            self.dirty = False
        logger.info("已加载 %d 条历史记录", len(self.history))

    def save(self):
        """保存历史记录到文件，失败时抛出 HistoryIOError 并保持 dirty"""
        if not self.history_file:
            return
        with self._save_lock:
            with self.history_lock:
                data = self._snapshot
                version = self.version
            save_history(data, self.history_file)
            with self.history_lock:
                if self.version == version:
                    self.dirty = False

    def flush(self):
        """仅在有未保存的修改时写盘"""
        if self.dirty:
            self.save()
            return True
        return False

    def capture(self, content):
        """记录新内容，返回条目 id；与当前第一条相同则返回 None"""
        with self.history_lock:
            if self.history and self.history[0].content == content:
                return None

            for i, entry in enumerate(self.history):
                if entry.content == content:
                    # 已存在的旧条目提升到最前，不重复添加；id 不变，时间更新为本次捕获
                    timestamp = self._next_timestamp()
                    del self.history[i]
                    self.history.insert(0, dataclasses.replace(entry, timestamp=timestamp))
                    self._changed()
                    logger.debug("提升条目 %s 到最前", entry.id)
                    return entry.id

            entry = Entry(content, timestamp=self._next_timestamp())
            self.history.insert(0, entry)
            if len(self.history) > self.max_items:
                evicted = self.history[self.max_items:]
                del self.history[self.max_items:]
                logger.debug("超出上限，淘汰 %d 条最旧记录", len(evicted))
            self._changed()
        logger.debug("新增条目 %s (%d 字符)", entry.id, len(content))
        return entry.id

    def remove(self, entry_id):
        with self.history_lock:
            for i, entry in enumerate(self.history):
                if entry.id == entry_id:
                    del self.history[i]
                    self._changed()
                    break
            else:
                raise EntryNotFound(entry_id)
        logger.debug("删除条目 %s", entry_id)

    def get(self, entry_id):
        with self.history_lock:
            for entry in self.history:
                if entry.id == entry_id:
                    return entry
        return None

    def clear(self):
        """清空历史记录"""
        with self.history_lock:
            self.history.clear()
            self._changed()

    def get_copy(self):
        """获取历史记录快照（最新在前），不可变"""
        with self.history_lock:
            return self._snapshot

    def get_length(self):
        """获取历史记录长度"""
        with self.history_lock:
            return len(self.history)
