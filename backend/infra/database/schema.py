from sqlalchemy import text
from sqlalchemy.engine import Engine
from utils.logger import get_logger

logger = get_logger(__name__)

def get_db_schema_sql() -> str:
    """
    DuckDB は SERIAL を持たないため、id はシーケンスの nextval で採番する。
    "group" は予約語なのでクォートが必要。
    スキーマのバージョンは alembic_version テーブルで管理する。
    """
    return """
    CREATE SEQUENCE IF NOT EXISTS seq_songs_id START 1;

    CREATE TABLE IF NOT EXISTS songs (
        id INTEGER PRIMARY KEY DEFAULT nextval('seq_songs_id'),
        "group" VARCHAR(255) NOT NULL DEFAULT '',
        song VARCHAR(255) NOT NULL DEFAULT '',
        release_date VARCHAR(50) NOT NULL DEFAULT '',
        text TEXT NOT NULL DEFAULT '',
        link TEXT NOT NULL DEFAULT '',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """

def init_raw_db(conn_engine: Engine):
    logger.info("Initializing DuckDB schema...")
    try:
        with conn_engine.begin() as conn:
            statements = [s.strip() for s in get_db_schema_sql().split(';') if s.strip()]
            for stmt in statements:
                conn.execute(text(stmt))
    except Exception as e:
        logger.error(f"Failed to initialize database schema: {e}")
        raise
