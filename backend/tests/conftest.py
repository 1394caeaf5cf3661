import os
import pytest
import sys
import tempfile
import uuid
from typing import Generator
from sqlmodel import Session, create_engine
from alembic import command

# 1. パス解決: backendディレクトリをsys.pathに追加
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.dirname(CURRENT_DIR)
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# 2. config.settings はインポート時に確定するため、アプリのモジュールより先に環境変数を設定する
TEST_DATA_DIR = tempfile.mkdtemp(prefix="songs_test_")
os.environ["USER_DATA_DIR"] = TEST_DATA_DIR
os.environ["DB_PATH"] = os.path.join(TEST_DATA_DIR, "bootstrap.duckdb")
os.environ["LOG_DIR"] = os.path.join(TEST_DATA_DIR, "logs")
os.environ["API_BASE_URL"] = "http://lookup.test"

import infra.database.connection as db_connection
from infra.database.schema import init_raw_db

@pytest.fixture(name="session", scope="function")
def session_fixture(mocker) -> Generator[Session, None, None]:
    """
    テストごとに完全に独立したDB環境（物理ファイル）を構築する。
    DuckDBの接続競合を避けるため、単一のエンジンを Alembic と共有します。
    """
    unique_id = str(uuid.uuid4())
    test_db_path = os.path.join(TEST_DATA_DIR, f"songs_test_{unique_id}.duckdb")

    connect_args = {'config': {'worker_threads': 4, 'access_mode': 'READ_WRITE'}}
    engine = create_engine(
        f"duckdb:///{test_db_path}",
        connect_args=connect_args
    )

    # アプリケーション全体で使用されるエンジングローバル変数をテスト用に差し替え
    db_connection.engine = engine
    db_connection.DB_PATH = test_db_path
    db_connection.DATABASE_URL = f"duckdb:///{test_db_path}"

    # 1. Raw SQLでテーブルとシーケンスを直接作成
    init_raw_db(engine)

    # 2. Alembicにテスト用エンジンのコネクションを注入して stamp
    alembic_cfg = db_connection.get_alembic_config()
    with engine.begin() as connection:
        alembic_cfg.attributes["connection"] = connection
        command.stamp(alembic_cfg, "head")

    # 3. lifespan の DB 初期化/終了がテスト中に走らないようモック化
    mocker.patch("main.init_db")
    mocker.patch("main.close_db")

    with Session(engine) as session:
        yield session

    engine.dispose()
    if os.path.exists(test_db_path):
        try:
            os.remove(test_db_path)
        except OSError:
            pass

@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator:
    """FastAPIのTestClientを提供し、DBセッションをDIで差し替える"""
    from fastapi.testclient import TestClient
    from main import app
    from infra.database.connection import get_session

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

def make_lookup_response(mocker, status_code=200, payload=None):
    response = mocker.MagicMock()
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response

@pytest.fixture(name="lookup_response")
def lookup_response_fixture(mocker):
    """外部APIのレスポンスモックを作るファクトリ"""
    def factory(status_code=200, payload=None):
        return make_lookup_response(mocker, status_code, payload)
    return factory

@pytest.fixture(name="lookup_api", autouse=True)
def mock_lookup_api(mocker):
    """
    外部の楽曲情報APIをグローバルにモック化する (実ネットワークには出ない)。
    各テストは return_value / side_effect を差し替えて使う。
    """
    mock_get = mocker.patch("requests.Session.get")
    mock_get.return_value = make_lookup_response(mocker, payload={
        "releaseDate": "16.07.2006",
        "text": "Ooh baby, don't you know I suffer?\n\nOoh baby, can you hear me moan?",
        "link": "https://www.youtube.com/watch?v=Xsp3_a-PMTw",
    })
    return mock_get
