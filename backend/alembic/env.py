import os
import sys
from logging.config import fileConfig

from alembic import context
from alembic.ddl.impl import DefaultImpl
from sqlmodel import SQLModel, create_engine

# alembic CLI から直接実行された場合も backend/ 配下を import できるようにする
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import Song  # noqa: F401  (SQLModel.metadata への登録)
from infra.database.connection import DATABASE_URL

class DuckDBImpl(DefaultImpl):
    """alembic は duckdb 方言を知らないので汎用実装に割り当てる"""
    __dialect__ = "duckdb"

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

def run_migrations(connection) -> None:
    context.configure(connection=connection, target_metadata=SQLModel.metadata)
    with context.begin_transaction():
        context.run_migrations()

# init_db / テストは自分の connection を渡す (DuckDB は同一ファイルへの二重接続でロックされる)
connection = config.attributes.get("connection")
if connection is not None:
    run_migrations(connection)
else:
    engine = create_engine(DATABASE_URL)
    try:
        with engine.connect() as conn:
            run_migrations(conn)
    finally:
        engine.dispose()
