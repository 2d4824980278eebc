"""User data export endpoint."""

from __future__ import annotations

from fastapi import APIRouter
import logging

from storefront.guards.session import SessionDep
from storefront.logic.data_export import DataExportService
from storefront.models.export import DataExportRequest, DataExportResponse


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/rest/user/data-export",
    summary="Export the current user's data",
    operation_id="exportUserData",
    tags=["DataExport"],
    response_model=DataExportResponse,
    responses={
        400: {"description": "Unsupported export format"},
        401: {"description": "Not logged in, or wrong answer to a pending CAPTCHA"},
    },
)
def export_user_data(body: DataExportRequest, session: SessionDep) -> DataExportResponse:
    logger.info(
        "data_export.request",
        extra={"user_id": session.user.id, "format": body.format, "answer_supplied": body.answer is not None},
    )
    outcome = DataExportService().export(session, str(body.format), body.answer)
    return DataExportResponse(confirmation=outcome.confirmation, user_data=outcome.user_data)


__all__ = ["router"]
