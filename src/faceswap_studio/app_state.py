"""Session state for the face composite app.

The UI never mutates state directly. It builds an event and hands it to
:func:`transition`, which returns a new :class:`AppState`.
:class:`CompositeController` owns the current state and is the only place that
calls the composite service.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from faceswap_studio.composite_service import SAFETY_MARKER, CompositeResult, composite

logger = logging.getLogger(__name__)

HISTORY_LIMIT: int = 10
DEFAULT_HISTORY_PROMPT: str = "Face Swap AI"
MISSING_IMAGES_MESSAGE: str = "Please select both images before starting."
UNEXPECTED_FAILURE_MESSAGE: str = "Something went wrong while creating the image. Please try again."

SAFETY_TIPS: Tuple[str, ...] = (
    "Tip 1: Avoid shots taken too close up or that are too suggestive.",
    "Tip 2: Make sure the face is evenly lit and not in shadow.",
)


class Slot(str, Enum):
    ORIGINAL = "original"
    REFERENCE = "reference"


class Phase(str, Enum):
    IDLE = "idle"
    IMAGES_PARTIAL = "images_partial"
    READY_TO_SUBMIT = "ready_to_submit"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ImageState:
    original: Optional[str] = None
    reference: Optional[str] = None
    modified: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class HistoryItem:
    id: str
    original: str
    reference: Optional[str]
    modified: str
    prompt: str
    timestamp: float


@dataclass(frozen=True)
class AppState:
    images: ImageState = field(default_factory=ImageState)
    history: Tuple[HistoryItem, ...] = ()
    prompt: str = ""

    @property
    def has_both_images(self) -> bool:
        return bool(self.images.original and self.images.reference)

    @property
    def can_submit(self) -> bool:
        return self.has_both_images and not self.images.loading

    @property
    def phase(self) -> Phase:
        images = self.images
        if images.loading:
            return Phase.SUBMITTING
        if images.error:
            return Phase.FAILED
        if images.modified:
            return Phase.SUCCEEDED
        if self.has_both_images:
            return Phase.READY_TO_SUBMIT
        if images.original or images.reference:
            return Phase.IMAGES_PARTIAL
        return Phase.IDLE


# ---------------------------------------------------------------------------
# Events


@dataclass(frozen=True)
class Upload:
    slot: Slot
    data_url: str


@dataclass(frozen=True)
class ClearImage:
    slot: Slot


@dataclass(frozen=True)
class EditPrompt:
    text: str


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class CompositeSucceeded:
    image: str
    item_id: str
    timestamp: float


@dataclass(frozen=True)
class CompositeFailed:
    message: str


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class SelectHistory:
    item_id: str


Event = Union[Upload, ClearImage, EditPrompt, Submit, CompositeSucceeded, CompositeFailed, Reset, SelectHistory]


# ---------------------------------------------------------------------------
# Transitions


def _upload(state: AppState, event: Upload) -> AppState:
    images = replace(
        state.images,
        **{Slot(event.slot).value: event.data_url},
        modified=None,
        error=None,
    )
    return replace(state, images=images)


def _clear_image(state: AppState, event: ClearImage) -> AppState:
    images = replace(
        state.images,
        **{Slot(event.slot).value: None},
        modified=None,
        error=None,
    )
    return replace(state, images=images)


def _submit(state: AppState) -> AppState:
    if state.images.loading:
        return state
    if not state.has_both_images:
        return replace(state, images=replace(state.images, error=MISSING_IMAGES_MESSAGE))
    return replace(
        state,
        images=replace(state.images, loading=True, error=None, modified=None),
    )


def _succeeded(state: AppState, event: CompositeSucceeded) -> AppState:
    images = state.images
    item = HistoryItem(
        id=event.item_id,
        original=images.original or "",
        reference=images.reference,
        modified=event.image,
        prompt=state.prompt.strip() or DEFAULT_HISTORY_PROMPT,
        timestamp=event.timestamp,
    )
    return replace(
        state,
        images=replace(images, modified=event.image, loading=False),
        history=(item, *state.history)[:HISTORY_LIMIT],
    )


def _select_history(state: AppState, event: SelectHistory) -> AppState:
    for item in state.history:
        if item.id == event.item_id:
            images = replace(
                state.images,
                original=item.original,
                reference=item.reference,
                modified=item.modified,
                error=None,
            )
            return replace(state, images=images)
    return state


def transition(state: AppState, event: Event) -> AppState:
    """Return the state that follows ``state`` once ``event`` has happened."""

    if isinstance(event, Upload):
        return _upload(state, event)
    if isinstance(event, ClearImage):
        return _clear_image(state, event)
    if isinstance(event, EditPrompt):
        return replace(state, prompt=event.text)
    if isinstance(event, Submit):
        return _submit(state)
    if isinstance(event, CompositeSucceeded):
        return _succeeded(state, event)
    if isinstance(event, CompositeFailed):
        return replace(state, images=replace(state.images, loading=False, error=event.message))
    if isinstance(event, Reset):
        return replace(state, images=ImageState())
    if isinstance(event, SelectHistory):
        return _select_history(state, event)
    raise TypeError(f"Unsupported event: {event!r}")


# ---------------------------------------------------------------------------
# Presentation helpers


def safety_tips(error: Optional[str]) -> List[str]:
    """Extra remediation tips shown when the safety filter rejected the images."""

    if error and SAFETY_MARKER in error:
        return list(SAFETY_TIPS)
    return []


def download_filename(now: Optional[float] = None) -> str:
    timestamp = time.time() if now is None else now
    return f"faceswap-{int(timestamp * 1000)}.png"


# ---------------------------------------------------------------------------
# Controller

Compositor = Callable[[str, str, str], CompositeResult]


class CompositeController:
    """Owns the session :class:`AppState` and runs composite requests."""

    def __init__(
        self,
        compositor: Compositor = composite,
        *,
        state: Optional[AppState] = None,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> None:
        self.compositor = compositor
        self.state = state or AppState()
        self.clock = clock
        self.id_factory = id_factory

    def dispatch(self, event: Event) -> AppState:
        self.state = transition(self.state, event)
        return self.state

    def upload(self, slot: Slot, data_url: str) -> AppState:
        return self.dispatch(Upload(slot=slot, data_url=data_url))

    def clear_image(self, slot: Slot) -> AppState:
        return self.dispatch(ClearImage(slot=slot))

    def set_prompt(self, text: str) -> AppState:
        return self.dispatch(EditPrompt(text=text))

    def reset(self) -> AppState:
        return self.dispatch(Reset())

    def select_history(self, item_id: str) -> AppState:
        return self.dispatch(SelectHistory(item_id=item_id))

    def submit(self) -> bool:
        """Run one composite. Returns ``False`` when the request was not sent."""

        if not self.state.can_submit:
            logger.debug("Submit ignored in phase %s", self.state.phase.value)
            self.dispatch(Submit())
            return False

        self.dispatch(Submit())
        images = self.state.images
        try:
            result = self.compositor(images.original, images.reference, self.state.prompt)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Composite request raised unexpectedly")
            self.dispatch(CompositeFailed(message=str(exc) or UNEXPECTED_FAILURE_MESSAGE))
            return True

        if result.ok:
            self.dispatch(
                CompositeSucceeded(image=result.image, item_id=self.id_factory(), timestamp=self.clock())
            )
        else:
            self.dispatch(CompositeFailed(message=result.error.message))
        return True
