from typing import Any, Dict, List, Mapping, Optional
from datetime import datetime
from sqlmodel import Session, select
from sqlalchemy import delete, func, update

from domain.models.song import Song

class UnknownFilterError(ValueError):
    def __init__(self, key: str):
        super().__init__(f"Unknown filter: {key}")
        self.key = key

class InvalidFilterValueError(ValueError):
    def __init__(self, key: str, value: str):
        super().__init__(f"Invalid value for filter '{key}': {value!r}")
        self.key = key
        self.value = value

# クエリ文字列で絞り込み可能なカラム (キー -> (カラム, 変換関数))
FILTERABLE_COLUMNS = {
    "id": (Song.id, int),
    "group": (Song.group, str),
    "song": (Song.song, str),
    "release_date": (Song.release_date, str),
    "text": (Song.text, str),
    "link": (Song.link, str),
    # ISO 8601 (例: 2024-01-02T03:04:05) で完全一致
    "created_at": (Song.created_at, datetime.fromisoformat),
    "updated_at": (Song.updated_at, datetime.fromisoformat),
}

class SongRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, song_id: int) -> Optional[Song]:
        return self.session.get(Song, song_id)

    def create(self, song: Song) -> Song:
        self.session.add(song)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(song)
        return song

    def _build_conditions(self, filters: Mapping[str, str]) -> List[Any]:
        """許可リストにあるキーだけを、型付きの等価条件に変換する (全て AND)"""
        conditions = []
        for key, raw_value in filters.items():
            if key not in FILTERABLE_COLUMNS:
                raise UnknownFilterError(key)
            column, convert = FILTERABLE_COLUMNS[key]
            try:
                value = convert(raw_value)
            except (TypeError, ValueError):
                raise InvalidFilterValueError(key, raw_value)
            conditions.append(column == value)
        return conditions

    def search(self, filters: Mapping[str, str], offset: int = 0, limit: int = 10) -> List[Song]:
        query = select(Song).where(*self._build_conditions(filters))
        query = query.order_by(Song.id).offset(offset).limit(limit)
        return self.session.exec(query).all()

    def count(self, filters: Mapping[str, str]) -> int:
        query = select(func.count()).select_from(Song).where(*self._build_conditions(filters))
        return self.session.exec(query).one()

    def update_fields(self, song_id: int, values: Dict[str, Any]) -> int:
        """存在しない id の場合は 0 行更新で正常終了する"""
        stmt = (
            update(Song)
            .where(Song.id == song_id)
            .values(**values, updated_at=datetime.now())
        )
        try:
            result = self.session.exec(stmt)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result.rowcount

    def delete_by_id(self, song_id: int) -> int:
        stmt = delete(Song).where(Song.id == song_id)
        try:
            result = self.session.exec(stmt)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result.rowcount
