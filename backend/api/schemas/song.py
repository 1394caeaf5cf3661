from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlmodel import SQLModel

class SongRead(SQLModel):
    id: int
    group: str
    song: str
    release_date: str
    text: str
    link: str
    created_at: datetime
    updated_at: datetime

class SongCreate(BaseModel):
    group: str = Field(..., min_length=1, max_length=255)
    song: str = Field(..., min_length=1, max_length=255)

class SongUpdate(BaseModel):
    """
    部分更新用の入力。
    ボディに「存在する」フィールドだけを上書きする (空文字列はクリアとして扱う)。
    id / created_at / updated_at などは無視する。
    """
    model_config = ConfigDict(extra="ignore")

    group: Optional[str] = Field(default=None, max_length=255)
    song: Optional[str] = Field(default=None, max_length=255)
    release_date: Optional[str] = Field(default=None, max_length=50)
    text: Optional[str] = None
    link: Optional[str] = None

    @model_validator(mode="after")
    def reject_explicit_null(self):
        nulls = sorted(k for k in self.model_fields_set if getattr(self, k) is None)
        if nulls:
            raise ValueError(f"Fields may not be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)

class SongPage(BaseModel):
    data: List[SongRead]
    total: int
    page: int
    limit: int

class VersePage(BaseModel):
    data: List[str]
    total: int
    page: int
    limit: int
