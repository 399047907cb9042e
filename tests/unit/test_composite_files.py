"""Unit tests for the file based composite runner."""

from __future__ import annotations

from pathlib import Path

import pytest

from faceswap_studio.composite_files import run_composite
from faceswap_studio.composite_service import CompositeResult, TechnicalError
from faceswap_studio.shared import encode_data_url


@pytest.fixture
def image_dirs(tmp_path: Path) -> dict:
    raw = tmp_path / "raw"
    model = tmp_path / "model"
    prompts = tmp_path / "prompts"
    for directory in (raw, model, prompts):
        directory.mkdir()
    (raw / "face.jpg").write_bytes(b"face")
    (model / "body.png").write_bytes(b"body")
    (prompts / "notes.md").write_text("Keep the freckles.\n", encoding="utf-8")
    return {
        "source_dir": raw,
        "target_dir": model,
        "prompt_dir": prompts,
        "output_dir": tmp_path / "processed",
        "source_name": "face.jpg",
        "target_name": "body.png",
    }


def test_run_composite_writes_result(image_dirs: dict) -> None:
    calls = []

    def compositor(source: str, target: str, instruction: str) -> CompositeResult:
        calls.append((source, target, instruction))
        return CompositeResult.success(encode_data_url("image/png", b"result"))

    output_path = run_composite(**image_dirs, instruction_file_name="notes.md", compositor=compositor)

    assert calls == [
        (
            encode_data_url("image/jpeg", b"face"),
            encode_data_url("image/png", b"body"),
            "Keep the freckles.",
        )
    ]
    assert output_path.parent == image_dirs["output_dir"]
    assert output_path.name.startswith("faceswap-") and output_path.suffix == ".png"
    assert output_path.read_bytes() == b"result"


def test_run_composite_raises_classified_error(image_dirs: dict) -> None:
    def compositor(source: str, target: str, instruction: str) -> CompositeResult:
        return CompositeResult.failure(TechnicalError("MAX_TOKENS"))

    with pytest.raises(TechnicalError, match="MAX_TOKENS"):
        run_composite(**image_dirs, instruction_file_name="", compositor=compositor)

    assert not image_dirs["output_dir"].exists()

