"""Fixed Gemini settings and the composite prompt template."""

from __future__ import annotations

from typing import Optional

# Gemini model to invoke. Adjust this if Google changes the model identifier.
MODEL_NAME: str = "gemini-2.5-flash-image"

# The composite is always requested as a square image.
ASPECT_RATIO: str = "1:1"

COMPOSITE_TASK_TEXT: str = """\
Artistic Task: Creative Portrait Compositing.

Inputs provided:
- IMAGE 1 (Identity Reference): Use this image to understand the facial features and unique identity of the person.
- IMAGE 2 (Base Portrait): This is the target image. Keep the body, hair, outfit, and background exactly as they are.

Goal:
Perform a professional portrait edit by placing the facial features of the person from IMAGE 1 onto the person in IMAGE 2.
The final person must clearly look like the person from IMAGE 1 while retaining the environment and style of IMAGE 2.
- Blend the skin tones naturally.
- Match the lighting and shadows of the original scene.
- Ensure a photorealistic and high-quality result."""

RETURN_FORMAT_TEXT: str = (
    "Return ONLY the final single edited image. "
    "Do not include any text or side-by-side comparisons."
)


def build_composite_prompt(instruction: Optional[str] = None) -> str:
    """Return the text part sent alongside the two images.

    The template frames image 1 as the identity source and image 2 as the scene
    to keep. ``instruction`` is appended as artist notes only when it holds
    something other than whitespace.
    """

    sections = [COMPOSITE_TASK_TEXT]

    notes = (instruction or "").strip()
    if notes:
        sections.append(f"- Additional Artist Notes: {notes}")

    sections.append(RETURN_FORMAT_TEXT)
    return "\n\n".join(sections)
