from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LINK_FIELDS = ("drive_link", "maketou_link", "youtube_link", "tiktok_link", "facebook_link")


class PdfEntryCreate(BaseModel):
    title: str
    category: str
    image_url: str
    drive_link: Optional[str] = None
    maketou_link: Optional[str] = None
    youtube_link: Optional[str] = None
    tiktok_link: Optional[str] = None
    facebook_link: Optional[str] = None

    @field_validator(*LINK_FIELDS)
    @classmethod
    def _blank_link_is_null(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class PdfEntry(BaseModel):
    id: int
    title: str
    category: str
    drive_link: Optional[str] = None
    maketou_link: Optional[str] = None
    youtube_link: Optional[str] = None
    tiktok_link: Optional[str] = None
    facebook_link: Optional[str] = None
    image_url: str
    published_at: datetime


class ImagePrompt(BaseModel):
    prompt: str


class Liveness(BaseModel):
    message: str


class DeleteResult(BaseModel):
    success: bool = True


class UploadResult(BaseModel):
    url: str


class GeneratedImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(alias="imageUrl")


class ErrorBody(BaseModel):
    error: str
