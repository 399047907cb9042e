"""Unit tests for ``build_composite_prompt``."""

from __future__ import annotations

from faceswap_studio.gemini_config import build_composite_prompt


def test_prompt_frames_image_roles_and_single_output() -> None:
    prompt = build_composite_prompt("")

    assert "IMAGE 1 (Identity Reference)" in prompt
    assert "IMAGE 2 (Base Portrait)" in prompt
    assert "Keep the body, hair, outfit, and background" in prompt
    assert "Blend the skin tones naturally" in prompt
    assert prompt.endswith("Do not include any text or side-by-side comparisons.")


def test_notes_are_omitted_when_instruction_is_blank() -> None:
    assert "Additional Artist Notes" not in build_composite_prompt("")
    assert "Additional Artist Notes" not in build_composite_prompt("   ")
    assert "Additional Artist Notes" not in build_composite_prompt(None)


def test_notes_are_appended_before_the_return_format() -> None:
    prompt = build_composite_prompt("  keep the smile ")

    assert "- Additional Artist Notes: keep the smile" in prompt
    assert prompt.index("Additional Artist Notes") < prompt.index("Return ONLY")
