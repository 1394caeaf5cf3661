from dataclasses import dataclass
from fastapi import HTTPException, Query, Request

from utils.external_metadata import SongInfoClient

# DuckDB の LIMIT / OFFSET は BIGINT
MAX_SQL_INT = 2**63 - 1

@dataclass
class PageParams:
    page: int
    limit: int

def get_page_params(
    page: int = Query(1, ge=1, le=MAX_SQL_INT, description="Page number"),
    limit: int = Query(10, ge=1, le=MAX_SQL_INT, description="Items per page"),
) -> PageParams:
    # offset + limit も BIGINT に収まる必要がある
    if page * limit > MAX_SQL_INT:
        raise HTTPException(status_code=400, detail="page and limit are out of range")
    return PageParams(page=page, limit=limit)

def get_song_info_client(request: Request) -> SongInfoClient:
    """lifespan で生成したプロセス共有のクライアントを返す"""
    return request.app.state.song_info_client
