def filter_entries(entries, query):
    """不区分大小写的子串过滤，保持输入顺序（最新在前）；空查询原样返回"""
    if not query:
        return list(entries)
    needle = query.lower()
    return [e for e in entries if needle in e.content.lower()]
