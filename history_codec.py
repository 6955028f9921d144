"""
历史记录文件编解码

文件格式（JSON）：
    {
        "format": "clipman-history",
        "version": 1,
        "count": 2,
        "entries": [{"id": ..., "timestamp": ..., "content": ...}, ...]
    }

entries 按最新在前的顺序保存。JSON 字符串转义保证换行、制表符、空白
以及空字符串都能原样还原。
"""
import json
import os
import tempfile
import threading

from errors import HistoryFormatError, HistoryIOError
from models import Entry

FORMAT_TAG = "clipman-history"
FORMAT_VERSION = 1

# 同一进程内只允许一个写入者
_save_lock = threading.Lock()


def encode_history(entries):
    payload = {
        "format": FORMAT_TAG,
        "version": FORMAT_VERSION,
        "count": len(entries),
        "entries": [e.to_dict() for e in entries],
    }
    # 保持默认 ensure_ascii，孤立的代理字符会转义为 \udXXX 并原样读回
    return json.dumps(payload, indent=2)


def decode_history(text):
    try:
        data = json.loads(text)
    except ValueError as e:
        raise HistoryFormatError(f"不是合法的 JSON: {e}") from e

    if not isinstance(data, dict) or data.get("format") != FORMAT_TAG:
        raise HistoryFormatError("缺少格式标记")
    if data.get("version") != FORMAT_VERSION:
        raise HistoryFormatError(f"不支持的版本: {data.get('version')!r}")

    records = data.get("entries")
    count = data.get("count")
    if not isinstance(records, list) or not isinstance(count, int):
        raise HistoryFormatError("entries/count 字段缺失")
    if count != len(records):
        raise HistoryFormatError(f"记录数不符: 声明 {count}，实际 {len(records)}")

    entries = []
    seen = set()
    for i, record in enumerate(records):
        if not isinstance(record, dict) or not all(
            isinstance(record.get(key), str) for key in ("id", "timestamp", "content")
        ):
            raise HistoryFormatError(f"第 {i} 条记录格式错误")
        if record["id"] in seen:
            raise HistoryFormatError(f"重复的条目 id: {record['id']}")
        seen.add(record["id"])
        entries.append(Entry.from_dict(record))
    return entries


def save_history(entries, path):
    """原子写入：先写同目录临时文件，再替换目标文件"""
    directory = os.path.dirname(os.path.abspath(path))
    with _save_lock:
        tmp_path = None
        try:
            data = encode_history(entries)
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".history-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
            tmp_path = None
        except (OSError, UnicodeError) as e:
            raise HistoryIOError(path, e) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)


def load_history(path):
    """读取历史文件；文件不存在时返回空列表"""
    if not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise HistoryFormatError(f"文件编码错误: {e}") from e
    except OSError as e:
        raise HistoryIOError(path, e) from e
    if text == "":
        return []
    return decode_history(text)
