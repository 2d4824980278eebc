"""Data export orchestration.

Flow per request:

    RECEIVED -> [VERIFYING -> VERIFIED | REJECTED] -> AGGREGATING -> FORMATTING -> COMPLETED

Verification only happens when a CAPTCHA challenge is pending for the
session; then a missing answer is as wrong as a wrong one. REJECTED and
FAILED are terminal and carry no user data. The format code is checked
first so an unsupported format never burns a pending challenge.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from storefront.logic import inmemory_state
from storefront.logic.aggregator import UserDataAggregator
from storefront.logic.challenge import ChallengeStore
from storefront.logic.errors import AggregationFailed, WrongAnswer
from storefront.logic.events import DATA_EXPORT_COMPLETED, DATA_EXPORT_REJECTED, publish
from storefront.logic.export_formatter import ExportFormatter
from storefront.logic.security import Session

logger = logging.getLogger(__name__)


class ExportState(str, enum.Enum):
    RECEIVED = "received"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    REJECTED = "rejected"
    AGGREGATING = "aggregating"
    FORMATTING = "formatting"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ExportOutcome:
    confirmation: str
    user_data: str
    media_type: str
    states: List[ExportState] = field(default_factory=list)


class DataExportService:
    def __init__(
        self,
        challenges: Optional[ChallengeStore] = None,
        aggregator: Optional[UserDataAggregator] = None,
        formatter: Optional[ExportFormatter] = None,
    ) -> None:
        self.challenges = challenges or inmemory_state.CHALLENGES
        self.aggregator = aggregator or UserDataAggregator()
        self.formatter = formatter or ExportFormatter()

    def export(self, session: Session, format_code: str, answer: Optional[str] = None) -> ExportOutcome:
        states: List[ExportState] = [ExportState.RECEIVED]
        user_id = session.user.id

        # Raises UnsupportedFormat before any challenge is touched
        self.formatter.ensure_supported(format_code)

        try:
            verified = self.challenges.verify_if_pending(session.token, answer)
        except WrongAnswer:
            states.extend([ExportState.VERIFYING, ExportState.REJECTED])
            logger.info("data_export.rejected", extra={"user_id": user_id})
            publish(DATA_EXPORT_REJECTED, {"user_id": user_id, "reason": "captcha"})
            raise
        if verified is not None:
            states.extend([ExportState.VERIFYING, ExportState.VERIFIED])

        states.append(ExportState.AGGREGATING)
        try:
            snapshot = self.aggregator.aggregate(user_id)
            states.append(ExportState.FORMATTING)
            payload = self.formatter.format(snapshot, format_code)
        except AggregationFailed:
            states.append(ExportState.FAILED)
            logger.error("data_export.failed", extra={"user_id": user_id})
            raise

        states.append(ExportState.COMPLETED)
        logger.info(
            "data_export.completed",
            extra={"user_id": user_id, "format": payload.format_code, "bytes": len(payload.content)},
        )
        publish(
            DATA_EXPORT_COMPLETED,
            {"user_id": user_id, "orders": len(snapshot.orders), "reviews": len(snapshot.reviews)},
        )
        return ExportOutcome(
            confirmation=payload.confirmation,
            user_data=payload.content,
            media_type=payload.media_type,
            states=states,
        )


__all__ = ["ExportState", "ExportOutcome", "DataExportService"]
