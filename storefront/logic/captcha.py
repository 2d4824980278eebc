"""Image CAPTCHA issuance.

Produces a random answer, records it as the session's pending challenge and
returns an opaque SVG carrying the text. The SVG is a plain text element;
distortion and noise are not attempted.
"""

from __future__ import annotations

import logging
import secrets

from storefront.config import get_config
from storefront.logic import inmemory_state
from storefront.logic.security import Session
from storefront.models.auth import ImageCaptcha

logger = logging.getLogger(__name__)

# No 0/O, 1/l/I: the answer must be readable off the image
ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789"

_SVG_TEMPLATE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="150" height="50" viewBox="0,0,150,50">'
    '<text x="15" y="35" font-family="monospace" font-size="28" letter-spacing="4">{text}</text>'
    "</svg>"
)


def generate_answer(length: int | None = None) -> str:
    n = int(length or get_config().captcha.length)
    return "".join(secrets.choice(ALPHABET) for _ in range(n))


def render_svg(answer: str) -> str:
    return _SVG_TEMPLATE.format(text=answer)


def issue_captcha(session: Session) -> ImageCaptcha:
    """Create a challenge for `session`, replacing any pending one."""
    answer = generate_answer()
    inmemory_state.CHALLENGES.issue(session.token, answer)
    logger.info("captcha.issued", extra={"user_id": session.user.id})
    return ImageCaptcha(image=render_svg(answer), answer=answer)


__all__ = ["ALPHABET", "generate_answer", "render_svg", "issue_captcha"]
