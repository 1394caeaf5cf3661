from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from sqlalchemy import Column, Text

class Song(SQLModel, table=True):
    __tablename__ = "songs"
    """
    楽曲モデル

    release_date / text / link は作成時に外部APIの応答をそのまま保存する。
    text の verse 分割は保存せず、読み出しのたびに行う。
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    group: str = Field(default="", max_length=255)
    song: str = Field(default="", max_length=255)
    release_date: str = Field(default="", max_length=50)
    text: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    link: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
