"""Data export request/response bodies and the aggregated snapshot."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.models.order import Order
from storefront.models.review import Review


class ExportSnapshot(BaseModel):
    """Point-in-time copy of everything exportable for one account."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    username: str
    email: str
    orders: List[Order] = Field(default_factory=list)
    reviews: List[Review] = Field(default_factory=list)


class DataExportRequest(BaseModel):
    # Clients send the format both as "1" and 1; both normalize to "1"
    format: Union[str, int]
    answer: Optional[str] = None

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, v: object) -> str:
        if isinstance(v, bool):
            raise ValueError("format must be a string or integer code")
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        raise ValueError("format must be a string or integer code")


class DataExportResponse(BaseModel):
    confirmation: str
    user_data: str = Field(alias="userData")

    model_config = ConfigDict(populate_by_name=True)


__all__ = ["ExportSnapshot", "DataExportRequest", "DataExportResponse"]
