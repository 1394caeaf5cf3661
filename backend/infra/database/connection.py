from sqlmodel import create_engine, Session
import os
import threading
from config import settings
from infra.database.schema import init_raw_db
from utils.logger import get_logger

logger = get_logger(__name__)

# DBパス設定
DB_PATH = settings.DB_PATH
os.makedirs(os.path.dirname(os.path.abspath(DB_PATH)), exist_ok=True)

DATABASE_URL = f"duckdb:///{DB_PATH}"

# エンジン初期化 (プロセス全体で共有)
connect_args = {'config': {'worker_threads': 4, 'access_mode': 'READ_WRITE'}}
engine = create_engine(
    DATABASE_URL,
    pool_size=5,
    max_overflow=10,
    connect_args=connect_args
)

db_lock = threading.RLock()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

def get_alembic_config():
    from alembic.config import Config

    alembic_cfg = Config(os.path.join(BASE_DIR, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(BASE_DIR, "alembic"))
    return alembic_cfg

def init_db():
    """
    アプリケーション起動時のDB初期化フロー。
    DuckDBの接続競合を避けるため、単一のコネクションを Alembic と共有します。
    """
    from alembic import command

    # DBが新規作成かどうかを事前にチェック
    is_new_db = not os.path.exists(DB_PATH) or os.path.getsize(DB_PATH) == 0

    with db_lock:
        try:
            # 1. Raw SQL によるテーブルとシーケンスの作成
            init_raw_db(engine)

            # 2. Alembicマイグレーションの実行
            alembic_cfg = get_alembic_config()
            with engine.begin() as connection:
                alembic_cfg.attributes["connection"] = connection

                if is_new_db:
                    logger.info("New database detected. Stamping version...")
                    command.stamp(alembic_cfg, "head")
                else:
                    logger.info("Existing database detected. Running migrations...")
                    command.upgrade(alembic_cfg, "head")
        except Exception as e:
            logger.error(f"Error during database initialization: {e}")
            raise

def close_db():
    """
    データベース接続を終了する。
    main.py の lifespan イベントから呼び出されます。
    """
    engine.dispose()

def get_session():
    with Session(engine) as session:
        yield session
