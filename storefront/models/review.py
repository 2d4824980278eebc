"""Review snapshot model as exported to its author."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Review(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    author: str
    product_id: int = Field(alias="productId")
    likes_count: int = Field(default=0, ge=0, alias="likesCount")
    # Always a list; an unliked review exports []
    liked_by: List[str] = Field(default_factory=list, alias="likedBy")


__all__ = ["Review"]
