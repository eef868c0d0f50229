from typing import Optional

from pydantic import BaseModel, Field


class MediaUpdate(BaseModel):
    """Metadata edit; empty values keep the current text"""
    alt_text: Optional[str] = Field(None, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    caption: Optional[str] = Field(None, max_length=500)
