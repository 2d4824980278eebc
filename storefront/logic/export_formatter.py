"""Export serialization.

Format codes select a serializer. Code "1" is pretty-printed JSON with
camelCase keys and amounts as plain JSON numbers. Every format must parse
back into an equal ExportSnapshot.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Tuple

from storefront.logic.errors import UnsupportedFormat
from storefront.models.export import ExportSnapshot

logger = logging.getLogger(__name__)

CONFIRMATION = "Your data export will open in a new Browser window."

FORMAT_JSON = "1"


@dataclass(frozen=True)
class SerializedPayload:
    format_code: str
    media_type: str
    content: str
    confirmation: str = CONFIRMATION


def _dump_json(snapshot: ExportSnapshot) -> str:
    return json.dumps(snapshot.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)


def _load_json(content: str) -> ExportSnapshot:
    # Decimal keeps 9.98 exact on the way back in
    return ExportSnapshot.model_validate(json.loads(content, parse_float=Decimal))


_Codec = Tuple[str, Callable[[ExportSnapshot], str], Callable[[str], ExportSnapshot]]

FORMATS: Dict[str, _Codec] = {
    FORMAT_JSON: ("application/json", _dump_json, _load_json),
}


class ExportFormatter:
    def __init__(self, formats: Dict[str, _Codec] | None = None) -> None:
        self._formats = dict(formats or FORMATS)

    def _codec(self, format_code: str) -> _Codec:
        codec = self._formats.get(str(format_code))
        if codec is None:
            logger.info("export.format.unsupported code=%s", format_code)
            raise UnsupportedFormat(f"Export format '{format_code}' is not supported.")
        return codec

    def ensure_supported(self, format_code: str) -> None:
        self._codec(format_code)

    def format(self, snapshot: ExportSnapshot, format_code: str) -> SerializedPayload:
        media_type, dump, _ = self._codec(format_code)
        return SerializedPayload(format_code=str(format_code), media_type=media_type, content=dump(snapshot))

    def parse(self, payload: SerializedPayload | str, format_code: str = FORMAT_JSON) -> ExportSnapshot:
        if isinstance(payload, SerializedPayload):
            format_code, content = payload.format_code, payload.content
        else:
            content = payload
        _, _, load = self._codec(format_code)
        return load(content)


__all__ = ["CONFIRMATION", "FORMAT_JSON", "FORMATS", "SerializedPayload", "ExportFormatter"]
