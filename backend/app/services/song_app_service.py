from typing import Any, Dict, Mapping, Optional
from sqlmodel import Session

from domain.models.song import Song
from domain.services.verses import page_offset, paginate, split_verses
from infra.repositories.song_repository import SongRepository
from api.schemas.song import SongCreate, SongUpdate
from utils.external_metadata import SongInfoClient
from utils.logger import get_logger

logger = get_logger(__name__)

class SongNotFoundError(ValueError):
    def __init__(self, song_id: int):
        super().__init__(f"Song {song_id} not found")
        self.song_id = song_id

class SongAppService:
    def __init__(self, session: Session, client: Optional[SongInfoClient] = None):
        self.session = session
        self.repository = SongRepository(session)
        self.client = client

    def list_songs(self, filters: Mapping[str, str], page: int = 1, limit: int = 10) -> Dict[str, Any]:
        """filters は全て AND の完全一致。total はページング前の件数。"""
        total = self.repository.count(filters)
        songs = self.repository.search(filters, offset=page_offset(page, limit), limit=limit)
        return {"data": songs, "total": total, "page": page, "limit": limit}

    def get_song_text(self, song_id: int, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        song = self.repository.get_by_id(song_id)
        if not song:
            raise SongNotFoundError(song_id)

        verses = split_verses(song.text)
        return {
            "data": paginate(verses, page, limit),
            "total": len(verses),
            "page": page,
            "limit": limit,
        }

    def create_song(self, request: SongCreate) -> Song:
        """
        外部APIで release_date / text / link を補完してから1行だけ挿入する。
        外部API呼び出しが失敗した場合は何も書き込まない。
        """
        detail = self.client.fetch_info(request.group, request.song)

        song = Song(
            group=request.group,
            song=request.song,
            release_date=detail.release_date,
            text=detail.text,
            link=detail.link,
        )
        saved = self.repository.create(song)
        logger.info(f"Created song {saved.id}: {saved.group} - {saved.song}")
        return saved

    def update_song(self, song_id: int, update: SongUpdate) -> Dict[str, Any]:
        changes = update.changes()
        affected = self.repository.update_fields(song_id, changes)
        logger.info(f"Updated song {song_id} ({', '.join(changes) or 'no fields'}), rows={affected}")
        # 更新後の行ではなく、受け取った内容をそのまま返す
        return changes

    def delete_song(self, song_id: int) -> None:
        affected = self.repository.delete_by_id(song_id)
        logger.info(f"Deleted song {song_id}, rows={affected}")
