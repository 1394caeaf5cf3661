from typing import List, Sequence, TypeVar

T = TypeVar("T")

# 空行 (改行2つ) で区切られたテキストを1つの verse とする
VERSE_DELIMITER = "\n\n"

def split_verses(text: str) -> List[str]:
    """
    歌詞テキストを verse のリストに分割する。
    区切りは厳密に "\\n\\n" のみ ("\\r\\n\\n" や3つ以上の改行を特別扱いしない)。
    空文字列は空の verse 1つになる。
    """
    return text.split(VERSE_DELIMITER)

def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit

def paginate(items: Sequence[T], page: int, limit: int) -> List[T]:
    """items[(page-1)*limit : min(page*limit, len(items))]. 範囲外は空リスト。"""
    offset = page_offset(page, limit)
    if offset >= len(items):
        return []
    end = min(offset + limit, len(items))
    return list(items[offset:end])
