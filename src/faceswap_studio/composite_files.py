"""Run one face composite from files on disk.

This module wires together a minimal workflow to:

1. Load your Gemini API key from a ``.env`` file.
2. Select the source face from ``data/raw`` and the target photo from ``data/model``.
3. Optionally read extra notes from a markdown file under ``data/prompts``.
4. Persist the returned image under ``data/processed``.

Update the configuration block just below to pick other photos.
"""

from __future__ import annotations

import time
from pathlib import Path

from faceswap_studio.app_state import download_filename
from faceswap_studio.composite_service import composite
from faceswap_studio.gemini_config import MODEL_NAME
from faceswap_studio.shared import (
    decode_data_url,
    load_instruction,
    read_image_as_data_url,
    resolve_source_and_target_paths,
)

# ---------------------------------------------------------------------------
# Configuration section – tweak these values before each run.

# Photo whose face identity is kept, relative to SOURCE_IMAGE_DIR.
SOURCE_FACE_NAME: str = "source-face.jpg"

# Photo whose body, outfit and background are kept, relative to TARGET_IMAGE_DIR.
TARGET_BODY_NAME: str = "target-body.jpg"

# Optional markdown file with extra notes, relative to PROMPT_DIR. Empty means none.
INSTRUCTION_FILE_NAME: str = ""

# ---------------------------------------------------------------------------
# Derived paths.

PROJECT_ROOT: Path = Path(__file__).resolve().parents[2]
PROMPT_DIR: Path = PROJECT_ROOT / "data" / "prompts"
SOURCE_IMAGE_DIR: Path = PROJECT_ROOT / "data" / "raw"
TARGET_IMAGE_DIR: Path = PROJECT_ROOT / "data" / "model"
PROCESSED_IMAGE_DIR: Path = PROJECT_ROOT / "data" / "processed"


def _display(path: Path) -> Path:
    try:
        return path.relative_to(PROJECT_ROOT)
    except ValueError:
        return path


def run_composite(
    *,
    source_dir: Path = SOURCE_IMAGE_DIR,
    target_dir: Path = TARGET_IMAGE_DIR,
    prompt_dir: Path = PROMPT_DIR,
    output_dir: Path = PROCESSED_IMAGE_DIR,
    source_name: str = SOURCE_FACE_NAME,
    target_name: str = TARGET_BODY_NAME,
    instruction_file_name: str = INSTRUCTION_FILE_NAME,
    compositor=composite,
) -> Path:
    """Top-level helper that executes the end-to-end composite workflow."""

    source_path, target_path = resolve_source_and_target_paths(
        source_dir=source_dir,
        target_dir=target_dir,
        source_name=source_name,
        target_name=target_name,
    )
    instruction = load_instruction(prompt_dir, instruction_file_name)

    print("🙂 Source face:")
    print(f"  - {_display(source_path)}")
    print("🎯 Target photo:")
    print(f"  - {_display(target_path)}")
    if instruction:
        print("📝 Additional notes:")
        print(f"  - {instruction}")

    print(f"🚀 Sending composite request to {MODEL_NAME}")
    result = compositor(
        read_image_as_data_url(source_path),
        read_image_as_data_url(target_path),
        instruction,
    )
    if not result.ok:
        raise result.error

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / download_filename(time.time())
    output_path.write_bytes(decode_data_url(result.image))

    print("✅ Gemini returned the composite:")
    print(f"  - {_display(output_path)}")
    return output_path


def main() -> None:
    """CLI entry-point used when running this module directly."""

    try:
        run_composite()
    except Exception as exc:  # noqa: BLE001 - surface helpful message to newcomers.
        print(f"❌ {exc}")


if __name__ == "__main__":
    main()
