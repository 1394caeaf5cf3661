from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlmodel import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict
from infra.database.connection import get_session
from infra.repositories.song_repository import UnknownFilterError, InvalidFilterValueError
from api.dependencies import PageParams, get_page_params, get_song_info_client
from api.schemas.song import SongCreate, SongPage, SongRead, SongUpdate, VersePage
from app.services.song_app_service import SongAppService, SongNotFoundError
from utils.external_metadata import (
    SongInfoClient,
    LookupDecodeError,
    LookupRejectedError,
    LookupUnavailableError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["songs"])

PAGINATION_KEYS = ("page", "limit")

def database_error(e: Exception) -> HTTPException:
    logger.error(f"Database error: {e}")
    return HTTPException(status_code=500, detail="Database error")

def collect_filters(request: Request) -> Dict[str, str]:
    """page / limit 以外のクエリキーをフィルタとして扱う (同じキーが複数あれば先頭の値)"""
    filters: Dict[str, str] = {}
    for key, value in request.query_params.multi_items():
        if key in PAGINATION_KEYS or key in filters:
            continue
        filters[key] = value
    return filters

@router.get("/songs", response_model=SongPage)
def list_songs(
    request: Request,
    paging: PageParams = Depends(get_page_params),
    session: Session = Depends(get_session)
):
    """
    楽曲一覧。page / limit 以外のクエリキーは同名カラムの完全一致フィルタ
    (id, group, song, release_date, text, link, created_at, updated_at)。
    """
    service = SongAppService(session)
    try:
        return service.list_songs(collect_filters(request), paging.page, paging.limit)
    except (UnknownFilterError, InvalidFilterValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        raise database_error(e)

@router.get("/songs/{song_id}/text", response_model=VersePage)
def get_song_text(
    song_id: int,
    paging: PageParams = Depends(get_page_params),
    session: Session = Depends(get_session)
):
    """歌詞を空行区切りの verse 単位でページングして返す"""
    service = SongAppService(session)
    try:
        return service.get_song_text(song_id, paging.page, paging.limit)
    except SongNotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")
    except SQLAlchemyError as e:
        raise database_error(e)

@router.delete("/songs/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_song(song_id: int, session: Session = Depends(get_session)):
    # 存在しない id でも 204 (冪等)
    service = SongAppService(session)
    try:
        service.delete_song(song_id)
    except SQLAlchemyError as e:
        raise database_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.put("/songs/{song_id}")
def update_song(song_id: int, update: SongUpdate, session: Session = Depends(get_session)):
    """
    ボディに含まれるフィールドだけを上書きする。
    レスポンスは受け取った内容のエコーで、存在しない id でも 200 を返す。
    """
    service = SongAppService(session)
    try:
        return service.update_song(song_id, update)
    except SQLAlchemyError as e:
        raise database_error(e)

@router.post("/songs", response_model=SongRead, status_code=status.HTTP_201_CREATED)
def create_song(
    request: SongCreate,
    session: Session = Depends(get_session),
    client: SongInfoClient = Depends(get_song_info_client)
):
    """外部APIから release_date / text / link を取得して楽曲を登録する"""
    service = SongAppService(session, client)
    try:
        return service.create_song(request)
    except LookupUnavailableError:
        raise HTTPException(status_code=500, detail="External API error")
    except LookupRejectedError as e:
        # 上流のステータスコードをそのまま返す
        raise HTTPException(status_code=e.status_code, detail="External API returned error")
    except LookupDecodeError:
        raise HTTPException(status_code=500, detail="Internal error")
    except SQLAlchemyError as e:
        raise database_error(e)
