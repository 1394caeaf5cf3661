import pytest
from datetime import datetime
from sqlmodel import Session
from models import Song
from infra.repositories.song_repository import (
    SongRepository,
    UnknownFilterError,
    InvalidFilterValueError,
)

@pytest.fixture
def repository(session: Session) -> SongRepository:
    repo = SongRepository(session)
    for group, title, date in [
        ("Muse", "Uprising", "2009"),
        ("Muse", "Starlight", "2006"),
        ("Radiohead", "Creep", "1992"),
        ("Radiohead", "Nude", "2007"),
        ("Muse", "Hysteria", "2003"),
    ]:
        repo.create(Song(group=group, song=title, release_date=date))
    return repo

def test_create_assigns_id_and_timestamps(session: Session):
    repo = SongRepository(session)
    song = repo.create(Song(group="G", song="S", text="a\n\nb", link="http://l"))

    assert song.id is not None
    assert song.created_at is not None
    assert song.updated_at is not None
    assert repo.get_by_id(song.id).text == "a\n\nb"

def test_count_matches_search_without_paging(repository: SongRepository):
    filters = {"group": "Muse"}
    assert repository.count(filters) == 3
    assert len(repository.search(filters, offset=0, limit=100)) == 3
    assert repository.count({}) == 5

def test_search_is_ordered_by_id(repository: SongRepository):
    titles = [s.song for s in repository.search({}, offset=0, limit=10)]
    assert titles == ["Uprising", "Starlight", "Creep", "Nude", "Hysteria"]

    titles = [s.song for s in repository.search({"group": "Muse"}, offset=1, limit=1)]
    assert titles == ["Starlight"]

def test_search_filters_are_anded(repository: SongRepository):
    result = repository.search({"group": "Radiohead", "release_date": "2007"})
    assert [s.song for s in result] == ["Nude"]
    assert repository.count({"group": "Muse", "song": "Creep"}) == 0

def test_unknown_filter_rejected(repository: SongRepository):
    with pytest.raises(UnknownFilterError) as exc_info:
        repository.search({"1=1; DROP TABLE songs; --": "x"})
    assert "Unknown filter" in str(exc_info.value)

    with pytest.raises(UnknownFilterError):
        repository.count({"lyrics": "x"})

    # テーブルは無事
    assert repository.count({}) == 5

def test_invalid_filter_value(repository: SongRepository):
    with pytest.raises(InvalidFilterValueError):
        repository.count({"id": "one"})
    with pytest.raises(InvalidFilterValueError):
        repository.count({"created_at": "yesterday"})

def test_filter_by_timestamps(session: Session):
    repo = SongRepository(session)
    stamp = datetime(2024, 1, 2, 3, 4, 5)
    repo.create(Song(group="G", song="Old", created_at=stamp, updated_at=stamp))
    repo.create(Song(group="G", song="New"))

    result = repo.search({"created_at": "2024-01-02T03:04:05"})
    assert [s.song for s in result] == ["Old"]
    # 日付と時刻の区切りは空白でもよい
    assert repo.count({"updated_at": "2024-01-02 03:04:05"}) == 1
    assert repo.count({"created_at": "2024-01-02"}) == 0

def test_update_fields_only_touches_given_columns(session: Session):
    repo = SongRepository(session)
    stale = datetime(2000, 1, 1)
    song = repo.create(Song(group="G", song="S", release_date="2000", text="t", updated_at=stale))
    song_id = song.id
    created = song.created_at

    repo.update_fields(song_id, {"release_date": "2001"})

    session.expire_all()
    updated = repo.get_by_id(song_id)
    assert updated.release_date == "2001"
    assert updated.group == "G"
    assert updated.text == "t"
    assert updated.updated_at > stale
    assert updated.created_at == created

def test_update_and_delete_missing_id_do_not_raise(session: Session):
    repo = SongRepository(session)
    repo.update_fields(424242, {"group": "X"})
    repo.delete_by_id(424242)
    assert repo.count({}) == 0
