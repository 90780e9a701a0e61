"""
Repair near-JSON model output into a :class:`StoryRecord`.

Models asked to embed free-form prose inside a JSON string routinely emit raw
newlines and doubled quotes in that value. The repair only rewrites
characters inside the one designated body field; everything else, including
existing escape sequences, is left untouched.
"""

from __future__ import annotations

import json
import logging
import re

from storyweaver.common import JsonSyntaxError, MalformedResponseError

from .record import CANONICAL_FIELDS, FieldMapping, StoryRecord

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 200


def _preview(text: str) -> str:
    if len(text) <= _PREVIEW_CHARS:
        return text
    return text[:_PREVIEW_CHARS] + "..."


def locate_json_object(raw: str) -> str:
    """
    Return the span from the first ``{`` to the last ``}`` of ``raw``.
    """
    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end <= start:
        logger.warning("No JSON object found in model output: %r", _preview(raw))
        raise MalformedResponseError("missing opening or closing braces", details=raw)
    return raw[start : end + 1]


def _body_marker(body_key: str) -> re.Pattern[str]:
    return re.compile('"' + re.escape(body_key) + r'"\s*:\s*"')


def repair_body_field(text: str, body_key: str = "content") -> str:
    """
    Escape raw newlines and doubled quotes inside the ``body_key`` string value.

    Running the repair on its own valid output returns it unchanged.
    """
    marker = _body_marker(body_key)
    out: list[str] = []
    in_string = False
    in_body = False
    escaped = False
    index = 0
    length = len(text)

    while index < length:
        char = text[index]

        if escaped:
            out.append(char)
            escaped = False
            index += 1
            continue

        if char == "\\":
            out.append(char)
            escaped = True
            index += 1
            continue

        if in_body:
            if char == "\n":
                out.append("\\n")
            elif char == '"':
                if index + 1 < length and text[index + 1] == '"':
                    out.append('\\"')
                    index += 2
                    continue
                out.append(char)
                in_body = False
                in_string = False
            else:
                out.append(char)
            index += 1
            continue

        if not in_string:
            match = marker.match(text, index)
            if match is not None:
                out.append(match.group(0))
                index = match.end()
                in_body = True
                in_string = True
                continue

        if char == '"':
            in_string = not in_string
        out.append(char)
        index += 1

    return "".join(out)


def normalize(
    raw: str,
    mapping: FieldMapping = CANONICAL_FIELDS,
    *,
    body_key: str | None = None,
) -> StoryRecord:
    """
    Locate, repair, parse, and map a model response onto a :class:`StoryRecord`.

    Raises
    ------
    MalformedResponseError
        When ``raw`` holds no ``{ ... }`` span.
    JsonSyntaxError
        When the repaired span is still not valid JSON.
    SchemaMismatchError
        When the parsed object lacks or mistypes a field named by ``mapping``.
    """
    span = locate_json_object(raw)
    cleaned = repair_body_field(span, body_key or mapping.content_key)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("Repaired model output is not valid JSON (%s): %r", exc.msg, _preview(cleaned))
        raise JsonSyntaxError(exc.msg, cleaned, exc.pos) from exc

    return StoryRecord.from_mapping(parsed, mapping)
