"""Face composite requests against the Gemini image model.

This module wires together the single request the app makes:

1. Check that a Gemini API key is configured.
2. Split the two uploaded data URLs into inline image parts.
3. Send them with the composite prompt to the image model.
4. Turn the reply into a PNG data URL, or into a classified error.

``composite`` never raises for remote failures; it returns a
:class:`CompositeResult` holding either the image or the error.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from google import genai

from faceswap_studio.composite_response import ParsedResponse, parse_response
from faceswap_studio.gemini_config import MODEL_NAME, build_composite_prompt
from faceswap_studio.shared import (
    ImagePayload,
    build_user_content,
    load_api_key,
    request_composite_edit,
    split_data_url,
)

logger = logging.getLogger(__name__)

SAFETY_MARKER: str = "IMAGE_SAFETY"
SAFETY_FINISH_REASONS = frozenset({"SAFETY", "IMAGE_SAFETY"})


class CompositeError(Exception):
    """Base class for every failure surfaced by :func:`composite`."""

    default_message = "The face composite failed."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class MissingCredentials(CompositeError):
    default_message = "GEMINI_API_KEY was not found. Set it in your .env file before running."


class EmptyResponse(CompositeError):
    default_message = "The AI service did not respond. Please try again later."


class SafetyRejected(CompositeError):
    default_message = (
        f"The images were rejected by the safety filter ({SAFETY_MARKER}). "
        "Try a different photo with a clearly visible face, avoid sensitive poses, "
        "and avoid accessories that cover the face such as oversized sunglasses."
    )


class TechnicalError(CompositeError):
    def __init__(self, reason: Optional[str]) -> None:
        self.reason = reason
        super().__init__(f"The AI stopped with a technical error ({reason}). Try again with other images.")


class NoImageProduced(CompositeError):
    default_message = "No result could be produced from the selected images. Try sharper photos."


class TransportError(CompositeError):
    default_message = "Could not connect to the AI server."


@dataclass(slots=True, frozen=True)
class CompositeResult:
    """Either ``image`` (a PNG data URL) or ``error`` is set, never both."""

    image: Optional[str] = None
    error: Optional[CompositeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, image: str) -> "CompositeResult":
        return cls(image=image)

    @classmethod
    def failure(cls, error: CompositeError) -> "CompositeResult":
        return cls(error=error)


ClientFactory = Callable[..., Any]


def read_api_key() -> str:
    """Return the configured key or raise :class:`MissingCredentials`."""

    try:
        api_key = load_api_key()
    except Exception as exc:  # noqa: BLE001
        raise MissingCredentials(f"The Gemini configuration could not be read: {exc}") from exc
    if not api_key:
        raise MissingCredentials()
    return api_key


def collect_images(source_face: Optional[str], target_body: Optional[str]) -> List[ImagePayload]:
    """Return the decodable images in request order; malformed ones are skipped."""

    images: List[ImagePayload] = []
    for label, value in (("source face", source_face), ("target body", target_body)):
        payload = split_data_url(value)
        if payload is None:
            if value:
                logger.warning("Skipping the %s image: it is not a base64 data URL.", label)
            continue
        images.append(payload)
    return images


def interpret_response(parsed: ParsedResponse) -> str:
    """Return the PNG data URL carried by ``parsed`` or raise a :class:`CompositeError`."""

    if not parsed.candidates:
        raise EmptyResponse()

    candidate = parsed.candidates[0]

    if not candidate.has_content:
        if candidate.finish_reason in SAFETY_FINISH_REASONS:
            raise SafetyRejected()
        raise TechnicalError(candidate.finish_reason)

    image_part = candidate.first_image()
    if image_part is None:
        for text in parsed.texts():
            logger.info("Gemini replied with text instead of an image: %s", text)
        raise NoImageProduced()

    encoded = base64.b64encode(image_part.image_data).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def composite(
    source_face: Optional[str],
    target_body: Optional[str],
    instruction: Optional[str] = "",
    *,
    client_factory: ClientFactory = genai.Client,
    model_name: str = MODEL_NAME,
) -> CompositeResult:
    """Place the face from ``source_face`` onto the person in ``target_body``.

    Both images are ``data:<mime>;base64,<data>`` strings. ``instruction`` is
    optional free-form text forwarded to the model as extra notes. The request
    is attempted once.
    """

    try:
        api_key = read_api_key()
        images = collect_images(source_face, target_body)

        logger.info("Sending composite request to %s", model_name)
        try:
            user_content = build_user_content(
                images=images,
                prompt_text=build_composite_prompt(instruction),
            )
            client = client_factory(api_key=api_key)
            parsed = parse_response(
                request_composite_edit(
                    client=client,
                    user_content=user_content,
                    model_name=model_name,
                )
            )
        except Exception as exc:  # noqa: BLE001
            raise TransportError(str(exc) or None) from exc

        image = interpret_response(parsed)
    except CompositeError as error:
        logger.warning("Composite failed: %s", error)
        return CompositeResult.failure(error)

    return CompositeResult.success(image)
