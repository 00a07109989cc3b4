"""Decode a scanned QR payload into a student identity.

Three wire encodings are accepted, tried in ``PARSE_ORDER``:

* JSON object: ``{"studentId": ..., "fullName": ..., "gradeLevel": ..., "section": ..., "schoolId": ...}``
  (PascalCase keys are accepted too, ``strand`` is optional)
* pipe string: ``studentId|fullName|gradeLevel|section|schoolId`` (extra fields are ignored)
* a bare student id, in which case the rest of the identity is unknown
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Optional

from ..core.constants import QR_DELIMITER, QR_MIN_DELIMITED_FIELDS, UNKNOWN
from ..core.enums import PayloadShape
from .model import ActorContext, ParsedIdentity, ParseError, ParseResult, ScannedIdentity

logger = logging.getLogger(__name__)

PARSE_ORDER = (PayloadShape.JSON, PayloadShape.DELIMITED, PayloadShape.BARE)

_REQUIRED_JSON_FIELDS = ("studentId", "fullName", "gradeLevel", "section", "schoolId")


class _NotThisShape(Exception):
    """The payload is not in the shape being tried; move on to the next one."""


def _to_int(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def _lookup(obj: Mapping[str, Any], key: str) -> Any:
    if key in obj:
        return obj[key]
    return obj.get(key[0].upper() + key[1:])


def _from_json(text: str, actor: Optional[ActorContext]) -> Optional[ScannedIdentity]:
    try:
        obj = json.loads(text)
    except ValueError:
        raise _NotThisShape()
    if not isinstance(obj, dict):
        # e.g. a numeric bare id is valid JSON too
        raise _NotThisShape()

    values = {key: _lookup(obj, key) for key in _REQUIRED_JSON_FIELDS}
    if any(v is None for v in values.values()):
        return None

    strand = _lookup(obj, "strand")
    return ScannedIdentity(
        student_id=str(values["studentId"]).strip(),
        full_name=str(values["fullName"]),
        grade_level=_to_int(values["gradeLevel"]),
        section=str(values["section"]),
        school_id=str(values["schoolId"]),
        strand=str(strand) if strand else None,
    )


def _from_delimited(text: str, actor: Optional[ActorContext]) -> Optional[ScannedIdentity]:
    parts = text.split(QR_DELIMITER)
    if len(parts) == 1:
        raise _NotThisShape()
    if len(parts) < QR_MIN_DELIMITED_FIELDS:
        return None
    student_id, full_name, grade, section, school_id = parts[:QR_MIN_DELIMITED_FIELDS]
    return ScannedIdentity(
        student_id=student_id.strip(),
        full_name=full_name,
        grade_level=_to_int(grade),
        section=section,
        school_id=school_id,
    )


def _from_bare(text: str, actor: Optional[ActorContext]) -> Optional[ScannedIdentity]:
    return ScannedIdentity(
        student_id=text,
        full_name=UNKNOWN,
        grade_level=0,
        section=UNKNOWN,
        school_id=actor.school_id if actor else "",
    )


_DECODERS: dict[PayloadShape, Callable[[str, Optional[ActorContext]], Optional[ScannedIdentity]]] = {
    PayloadShape.JSON: _from_json,
    PayloadShape.DELIMITED: _from_delimited,
    PayloadShape.BARE: _from_bare,
}


def parse_identity(raw_text: str, actor: Optional[ActorContext] = None) -> ParseResult:
    """Return a ``ParsedIdentity`` or a ``ParseError``; never raises on bad input.

    A shape that recognises the payload but finds it incomplete stops the search,
    so ``a|b|c`` is rejected instead of being read as a bare id.
    """
    text = (raw_text or "").strip()
    if not text:
        logger.warning("Rejected empty QR payload")
        return ParseError(raw=raw_text or "")

    for shape in PARSE_ORDER:
        try:
            identity = _DECODERS[shape](text, actor)
        except _NotThisShape:
            continue

        if identity is None or not identity.student_id:
            logger.warning("Rejected %s QR payload with missing fields: %r", shape.value, text)
            return ParseError(raw=text)

        logger.debug("Parsed %s QR payload for student %s", shape.value, identity.student_id)
        return ParsedIdentity(identity=identity, shape=shape)

    return ParseError(raw=text)
