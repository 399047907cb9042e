"""Explicit, typed view of a Gemini ``GenerateContentResponse``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from google.genai import types as genai_types


@dataclass(slots=True, frozen=True)
class ParsedPart:
    """One content part. At most one of ``image_data`` and ``text`` is expected."""

    image_data: Optional[bytes] = None
    mime_type: Optional[str] = None
    text: Optional[str] = None


@dataclass(slots=True, frozen=True)
class ParsedCandidate:
    """First-class fields of a candidate.

    ``parts`` is ``None`` when the candidate carried no content body at all,
    which is how Gemini reports blocked or aborted generations.
    """

    finish_reason: Optional[str] = None
    parts: Optional[Tuple[ParsedPart, ...]] = None

    @property
    def has_content(self) -> bool:
        return self.parts is not None

    def first_image(self) -> Optional[ParsedPart]:
        for part in self.parts or ():
            if part.image_data:
                return part
        return None


@dataclass(slots=True, frozen=True)
class ParsedResponse:
    candidates: Tuple[ParsedCandidate, ...] = ()

    def texts(self) -> Tuple[str, ...]:
        return tuple(
            part.text
            for candidate in self.candidates
            for part in candidate.parts or ()
            if part.text
        )


def _finish_reason_code(reason: object) -> Optional[str]:
    if reason is None:
        return None
    # FinishReason is a str enum; keep plain strings untouched.
    return str(getattr(reason, "value", reason))


def _parse_part(part: genai_types.Part) -> ParsedPart:
    inline = part.inline_data
    if inline is not None and inline.data:
        return ParsedPart(image_data=inline.data, mime_type=inline.mime_type)
    return ParsedPart(text=part.text or None)


def _parse_candidate(candidate: genai_types.Candidate) -> ParsedCandidate:
    content = candidate.content
    parts: Optional[Tuple[ParsedPart, ...]] = None
    if content is not None and content.parts is not None:
        parts = tuple(_parse_part(part) for part in content.parts)

    return ParsedCandidate(
        finish_reason=_finish_reason_code(candidate.finish_reason),
        parts=parts,
    )


def parse_response(response: Optional[genai_types.GenerateContentResponse]) -> ParsedResponse:
    """Convert the SDK response into a :class:`ParsedResponse` (``None`` is empty)."""

    if response is None or not response.candidates:
        return ParsedResponse()
    return ParsedResponse(
        candidates=tuple(_parse_candidate(candidate) for candidate in response.candidates)
    )
