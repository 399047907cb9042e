"""Unit tests for ``parse_response``."""

from __future__ import annotations

from google.genai import types as genai_types

from faceswap_studio.composite_response import parse_response


def test_none_and_empty_candidates_parse_to_empty_response() -> None:
    assert parse_response(None).candidates == ()
    assert parse_response(genai_types.GenerateContentResponse(candidates=[])).candidates == ()


def test_candidate_without_content_has_no_parts() -> None:
    response = genai_types.GenerateContentResponse(
        candidates=[genai_types.Candidate(finish_reason=genai_types.FinishReason.SAFETY)]
    )

    candidate = parse_response(response).candidates[0]

    assert candidate.finish_reason == "SAFETY"
    assert candidate.parts is None
    assert not candidate.has_content


def test_parts_are_split_into_images_and_text() -> None:
    response = genai_types.GenerateContentResponse(
        candidates=[
            genai_types.Candidate(
                content=genai_types.Content(
                    role="model",
                    parts=[
                        genai_types.Part(text="Here you go"),
                        genai_types.Part(
                            inline_data=genai_types.Blob(mime_type="image/png", data=b"img")
                        ),
                    ],
                ),
                finish_reason=genai_types.FinishReason.STOP,
            )
        ]
    )

    parsed = parse_response(response)
    candidate = parsed.candidates[0]

    assert candidate.finish_reason == "STOP"
    assert candidate.first_image().image_data == b"img"
    assert candidate.first_image().mime_type == "image/png"
    assert parsed.texts() == ("Here you go",)
