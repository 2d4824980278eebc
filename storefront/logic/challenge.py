"""Per-session CAPTCHA challenge store and verifier.

Each session token owns at most one pending challenge (the most recently
issued one). Verification is an atomic compare-and-consume: the lock is held
across lookup, comparison and removal, so two concurrent submissions of the
same correct answer cannot both succeed.

Policy: a wrong answer leaves the challenge pending, so the user may retry
until it expires. Only a correct answer consumes it.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from storefront.logic.errors import WrongAnswer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Challenge:
    answer: str
    issued_at: float


class Verified:
    """Marker result of a successful verification."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Verified"


VERIFIED = Verified()


class ChallengeStore:
    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._slots: Dict[str, Challenge] = {}

    def _live(self, session_id: str) -> Optional[Challenge]:
        # caller holds self._lock
        challenge = self._slots.get(session_id)
        if challenge is None:
            return None
        if self._clock() - challenge.issued_at > self.ttl_seconds:
            del self._slots[session_id]
            return None
        return challenge

    def issue(self, session_id: str, answer: str) -> Challenge:
        challenge = Challenge(answer=answer, issued_at=self._clock())
        with self._lock:
            self._slots[session_id] = challenge
        return challenge

    def is_pending(self, session_id: str) -> bool:
        with self._lock:
            return self._live(session_id) is not None

    def verify(self, session_id: str, submitted_answer: Optional[str]) -> Verified:
        """Check `submitted_answer` against the session's pending challenge.

        Raises WrongAnswer on mismatch, on a missing answer, and when no live
        challenge exists (nothing to verify against, e.g. already consumed).
        """
        with self._lock:
            challenge = self._live(session_id)
            if challenge is None:
                logger.info("captcha.verify.no_pending_challenge")
                raise WrongAnswer()
            if submitted_answer is None or submitted_answer != challenge.answer:
                logger.info("captcha.verify.mismatch")
                raise WrongAnswer()
            del self._slots[session_id]
        logger.info("captcha.verify.consumed")
        return VERIFIED

    def verify_if_pending(self, session_id: str, submitted_answer: Optional[str]) -> Optional[Verified]:
        """Verify only when a live challenge exists, in one locked step.

        Returns None when nothing is pending (the answer is ignored), VERIFIED
        after consuming a matching challenge, and raises WrongAnswer otherwise.
        """
        with self._lock:
            challenge = self._live(session_id)
            if challenge is None:
                return None
            if submitted_answer is None or submitted_answer != challenge.answer:
                logger.info("captcha.verify.mismatch")
                raise WrongAnswer()
            del self._slots[session_id]
        logger.info("captcha.verify.consumed")
        return VERIFIED

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._slots.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._slots.clear()


__all__ = ["Challenge", "ChallengeStore", "Verified", "VERIFIED"]
