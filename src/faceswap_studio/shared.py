from __future__ import annotations

import base64
import binascii
import mimetypes
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from dotenv import load_dotenv
from google import genai
from google.genai import types as genai_types

from faceswap_studio.gemini_config import ASPECT_RATIO, MODEL_NAME


# ---------------------------------------------------------------------------
# Basic environment helpers


def load_api_key() -> Optional[str]:
    """Fetch the Gemini API key from the environment (via .env), or ``None``."""

    load_dotenv()
    return os.getenv("GEMINI_API_KEY") or None


# ---------------------------------------------------------------------------
# Data URL helpers

DATA_URL_PATTERN = re.compile(r"^data:([^;]+);base64,(.+)$")


@dataclass(slots=True, frozen=True)
class ImagePayload:
    """An image split out of a ``data:<mime>;base64,<data>`` string."""

    mime_type: str
    data: bytes


def split_data_url(value: Optional[str]) -> Optional[ImagePayload]:
    """Decompose a data URL, returning ``None`` when it is not an encoded image."""

    if not value:
        return None

    match = DATA_URL_PATTERN.match(value)
    if not match:
        return None

    try:
        data = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError):
        return None

    return ImagePayload(mime_type=match.group(1), data=data)


def encode_data_url(mime_type: str, data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def decode_data_url(value: str) -> bytes:
    """Return the raw bytes of a data URL, for downloads."""

    payload = split_data_url(value)
    if payload is None:
        raise ValueError("The value is not a base64 encoded data URL.")
    return payload.data


def read_image_as_data_url(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.as_posix())
    if not mime_type or not mime_type.startswith("image/"):
        raise ValueError(
            f"Could not infer an image MIME type for '{path.name}'. Rename it with a known extension."
        )
    return encode_data_url(mime_type, path.read_bytes())


# ---------------------------------------------------------------------------
# Prompt & file resolution helpers


def load_instruction(prompt_dir: Path, prompt_file_name: str) -> str:
    """Read the optional free-form instruction; an empty name means no notes."""

    if not prompt_file_name:
        return ""

    if not prompt_dir.exists():
        raise FileNotFoundError(
            f"Prompt directory '{prompt_dir}' does not exist. Create it or update PROMPT_DIR."
        )

    prompt_path = prompt_dir / prompt_file_name
    if not prompt_path.exists():
        available = ", ".join(path.name for path in prompt_dir.glob("*.md")) or "<none>"
        raise FileNotFoundError(
            f"Prompt file '{prompt_file_name}' was not found in '{prompt_dir}'. Available prompts: {available}"
        )

    return prompt_path.read_text(encoding="utf-8").strip()


def _resolve_image(directory: Path, name: str, setting: str) -> Path:
    if not directory.exists():
        raise FileNotFoundError(f"Image directory '{directory}' does not exist.")
    if not name:
        raise ValueError(f"{setting} is empty. Set it to the filename of the photo to use.")

    path = directory / name
    if not path.exists():
        available = ", ".join(p.name for p in sorted(directory.iterdir()) if p.is_file()) or "<none>"
        raise FileNotFoundError(
            f"Image '{name}' was not found in '{directory}'. Available files: {available}"
        )
    return path


def resolve_source_and_target_paths(
    source_dir: Path,
    target_dir: Path,
    source_name: str,
    target_name: str,
) -> Tuple[Path, Path]:
    source_path = _resolve_image(source_dir, source_name, "SOURCE_FACE_NAME")
    target_path = _resolve_image(target_dir, target_name, "TARGET_BODY_NAME")

    if source_path.resolve() == target_path.resolve():
        raise ValueError("The source face and the target body point to the same file.")

    return source_path, target_path


# ---------------------------------------------------------------------------
# Gemini request construction helpers


def build_user_content(
    *,
    images: Iterable[ImagePayload],
    prompt_text: str,
) -> genai_types.Content:
    """Assemble one ``user`` content block: the images in order, then the text."""

    parts: List[genai_types.Part] = [
        genai_types.Part(
            inline_data=genai_types.Blob(mime_type=image.mime_type, data=image.data)
        )
        for image in images
    ]
    parts.append(genai_types.Part(text=prompt_text))

    return genai_types.Content(role="user", parts=parts)


def request_composite_edit(
    *,
    client: genai.Client,
    user_content: genai_types.Content,
    model_name: str = MODEL_NAME,
) -> genai_types.GenerateContentResponse:
    return client.models.generate_content(
        model=model_name,
        contents=[user_content],
        config=genai_types.GenerateContentConfig(
            response_modalities=["IMAGE"],
            image_config=genai_types.ImageConfig(aspect_ratio=ASPECT_RATIO),
        ),
    )
