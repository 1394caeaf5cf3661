import os
from pydantic_settings import BaseSettings
from pydantic import Field
import platformdirs

APP_NAME = "SongLibrary"
APP_AUTHOR = "SongLibraryDev"

class Settings(BaseSettings):
    # App Info
    APP_NAME: str = APP_NAME
    APP_AUTHOR: str = APP_AUTHOR
    ENV: str = "prod"

    # Paths
    # DB_PATH / LOG_DIR が未指定なら USER_DATA_DIR 配下を使う
    USER_DATA_DIR: str = Field(default_factory=lambda: platformdirs.user_data_dir(APP_NAME, APP_AUTHOR))
    DB_PATH: str | None = None

    # Network
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # External lookup API (GET {API_BASE_URL}/info)
    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str | None = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    def model_post_init(self, __context):
        if not self.DB_PATH:
            self.DB_PATH = os.path.join(self.USER_DATA_DIR, "songs.duckdb")

        if not self.LOG_DIR:
            self.LOG_DIR = os.path.join(self.USER_DATA_DIR, "logs")

        self.API_BASE_URL = self.API_BASE_URL.rstrip("/")

settings = Settings()
