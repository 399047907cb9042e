"""Streamlit page for the face composite studio.

Layout:
  ┌──────────────────┬──────────────────┬─────────────┐
  │  Source face     │  Target photo    │  History    │
  ├──────────────────┴──────────────────┤  (sidebar)  │
  │  Notes + "Swap face" + errors       │             │
  ├─────────────────────────────────────┤             │
  │  Result + download                  │             │
  └─────────────────────────────────────┴─────────────┘

Run with ``faceswap-studio`` or ``streamlit run src/faceswap_studio/streamlit_app.py``.
"""

from __future__ import annotations

import logging
import mimetypes

import streamlit as st

from faceswap_studio.app_state import (
    CompositeController,
    Slot,
    download_filename,
    safety_tips,
)
from faceswap_studio.shared import decode_data_url, encode_data_url

logging.basicConfig(level=logging.INFO)

SUPPORTED_FORMATS = [
    "png", "jpg", "jpeg", "jfif", "webp", "gif", "bmp",
    "tif", "tiff", "heic", "heif", "avif",
]

st.set_page_config(page_title="FaceSwap Studio", page_icon="🎭", layout="wide")


def _init_session_state() -> None:
    defaults = {
        "controller": None,
        "uploader_nonce": 0,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value
    if st.session_state.controller is None:
        st.session_state.controller = CompositeController()


_init_session_state()
controller: CompositeController = st.session_state.controller


# ---------------------------------------------------------------------------
# Callbacks (run before the script reruns)


def _uploader_key(slot: Slot) -> str:
    return f"{slot.value}_upload_{st.session_state.uploader_nonce}"


def _on_upload(slot: Slot) -> None:
    uploaded = st.session_state.get(_uploader_key(slot))
    if uploaded is None:
        controller.clear_image(slot)
        return
    mime_type = uploaded.type or mimetypes.guess_type(uploaded.name)[0] or "image/png"
    controller.upload(slot, encode_data_url(mime_type, uploaded.getvalue()))


def _on_prompt_change() -> None:
    controller.set_prompt(st.session_state.prompt_input)


def _on_reset() -> None:
    controller.reset()
    # A new key gives the file uploaders a clean slate.
    st.session_state.uploader_nonce += 1


def _on_select_history(item_id: str) -> None:
    controller.select_history(item_id)


# ---------------------------------------------------------------------------
# Header

header_left, header_right = st.columns([5, 1])
with header_left:
    st.title("🎭 FaceSwap Studio")
    st.caption("Upload a source face and a target photo, then let Gemini composite them.")
with header_right:
    st.button("🔄 Start over", key="reset", on_click=_on_reset, width="stretch")


# ---------------------------------------------------------------------------
# Uploads

upload_columns = st.columns(2)
upload_specs = (
    (Slot.ORIGINAL, "1 · Source face", "Pick a clear, unobstructed photo of the face."),
    (Slot.REFERENCE, "2 · Target photo", "The body, outfit and scene to put the face into."),
)

for column, (slot, label, help_text) in zip(upload_columns, upload_specs):
    with column:
        st.subheader(label)
        st.file_uploader(
            label,
            type=SUPPORTED_FORMATS,
            help=help_text,
            key=_uploader_key(slot),
            on_change=_on_upload,
            args=(slot,),
            label_visibility="collapsed",
        )
        current = getattr(controller.state.images, slot.value)
        if current:
            st.image(current, width="stretch")
        else:
            st.info(help_text)


# ---------------------------------------------------------------------------
# Notes + action

prompt_column, action_column = st.columns([3, 1])
with prompt_column:
    st.text_input(
        "Additional notes",
        value=controller.state.prompt,
        key="prompt_input",
        on_change=_on_prompt_change,
        placeholder="e.g. brighten the skin, keep the smile…",
    )
with action_column:
    st.write("")
    submit_clicked = st.button(
        "3 · Swap face",
        key="submit",
        type="primary",
        disabled=not controller.state.can_submit,
        width="stretch",
    )

if submit_clicked:
    with st.spinner("Processing…"):
        controller.submit()

images = controller.state.images

if images.error:
    st.error(images.error, icon="⚠️")
    tips = safety_tips(images.error)
    if tips:
        for tip_column, tip in zip(st.columns(len(tips)), tips):
            tip_column.warning(tip)


# ---------------------------------------------------------------------------
# Result

if images.modified:
    st.divider()
    st.subheader("✅ Face swapped")
    result_bytes = decode_data_url(images.modified)
    st.image(images.modified, width="stretch")
    st.download_button(
        "💾 Download image",
        key="download",
        data=result_bytes,
        file_name=download_filename(),
        mime="image/png",
        width="stretch",
    )


# ---------------------------------------------------------------------------
# History

with st.sidebar:
    st.header("Recent")
    if not controller.state.history:
        st.caption("No images created yet.")
    for item in controller.state.history:
        st.image(item.modified, caption=item.prompt, width="stretch")
        st.button(
            "Open",
            key=f"history_{item.id}",
            on_click=_on_select_history,
            args=(item.id,),
            width="stretch",
        )
    st.divider()
    st.caption("Tip: portraits where the face fills about half the frame give the best identity match.")
