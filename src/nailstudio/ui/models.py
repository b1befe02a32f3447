"""Data models for Nail Studio UI state.

Each view keeps its state in a plain dataclass stored in a ``gr.State``, so
every browser session gets its own copy and nothing is shared between users.
The dataclasses carry only small, local mutators; the flows that talk to the
remote service live in :mod:`nailstudio.ui.handlers`.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from nailstudio.api.client import NailDesignClient
from nailstudio.api.models import GeneratedDesign, NailDesign
from nailstudio.core.config import NailStudioConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class AppContext:
    """Services shared by every handler of one running app.

    Not stored in ``gr.State``; handlers receive it through ``functools.partial``
    when the Blocks are built.
    """

    client: NailDesignClient
    config: NailStudioConfig


@dataclass
class ConfirmationDialogState:
    """Yes/no gate in front of a destructive action.

    The dialog only remembers the id its opener passed in.  ``confirm`` closes
    the dialog first and then hands that id to the caller's action, so reusing
    the dialog for another id afterwards cannot change what was confirmed.
    """

    target_id: str | None = None

    def is_open(self) -> bool:
        """True while a target is pending."""
        return self.target_id is not None

    def open(self, target_id: str) -> None:
        self.target_id = target_id

    def cancel(self) -> None:
        """Close without running anything."""
        self.target_id = None

    def confirm(self, action: Callable[[str], T]) -> T | None:
        """Close and run ``action`` once with the pending target.

        Returns:
            Whatever ``action`` returns, or None if the dialog was not open
        """
        target = self.target_id
        self.target_id = None
        if target is None:
            logger.debug("Confirm ignored: dialog was not open")
            return None
        return action(target)


class GeneratorStatus(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
    DELETING = "deleting"
    DOWNLOADING = "downloading"
    FAILED = "failed"


@dataclass
class GeneratorState:
    """Session state of the Generator tab.

    Attributes
    ----------
    status : GeneratorStatus
        Where the single tracked design is in its lifecycle
    prompt : str
        Last submitted prompt (kept after a failure for resubmission)
    design : GeneratedDesign | None
        Most recently generated design, if any
    error : str
        Message shown under the prompt box ("" when there is none)
    deleting_id : str | None
        Id confirmed for deletion and not yet processed
    dialog : ConfirmationDialogState
        Delete confirmation for the held design
    """

    status: GeneratorStatus = GeneratorStatus.IDLE
    prompt: str = ""
    design: GeneratedDesign | None = None
    error: str = ""
    deleting_id: str | None = None
    dialog: ConfirmationDialogState = field(default_factory=ConfirmationDialogState)

    def is_busy(self) -> bool:
        """True while a delete or download on the held design is running."""
        return self.status in (GeneratorStatus.DELETING, GeneratorStatus.DOWNLOADING)

    def __repr__(self) -> str:
        design_id = self.design.id if self.design else None
        return f"GeneratorState(status={self.status.value}, design={design_id})"


class GalleryStatus(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    ERROR = "error"


class ViewerTab(str, Enum):
    IMAGE = "image"
    DETAILS = "details"


@dataclass
class DetailViewerState:
    """Full-screen viewer for one gallery design.

    On narrow screens exactly one panel (image or details) is shown, chosen
    with ``active_tab``; on wide screens both panels are always shown.
    """

    design: NailDesign | None = None
    active_tab: ViewerTab = ViewerTab.IMAGE

    def is_open(self) -> bool:
        return self.design is not None

    def open(self, design: NailDesign) -> None:
        self.design = design
        self.active_tab = ViewerTab.IMAGE

    def close(self) -> None:
        self.design = None
        self.active_tab = ViewerTab.IMAGE

    def select_tab(self, tab: ViewerTab | str) -> None:
        self.active_tab = ViewerTab(tab)

    def handle_click(self, region: str) -> None:
        """React to a click on the overlay.

        Only the backdrop closes the viewer; clicks on the content region are
        contained and leave it open.
        """
        if region == "backdrop":
            self.close()

    def visible_panels(self, narrow: bool) -> tuple[ViewerTab, ...]:
        """Return the panels to show for the given viewport width."""
        if not self.is_open():
            return ()
        if narrow:
            return (self.active_tab,)
        return (ViewerTab.IMAGE, ViewerTab.DETAILS)


@dataclass
class GalleryState:
    """Session state of the Gallery tab.

    Attributes
    ----------
    status : GalleryStatus
        Loading / loaded / empty / error
    designs : list[NailDesign]
        Last fetched listing, in server order
    sort_order : str
        "desc" (newest first) or "asc" (oldest first)
    error : str
        Why the last load failed (shown with a retry button)
    notice : str
        Error from a secondary action (delete/download); list stays intact
    downloading : set[str]
        Ids with a download in flight (their controls are disabled)
    deleting : set[str]
        Ids with a delete in flight
    pending_downloads : list[str]
        Downloads requested and not yet picked up by a worker step
    pending_deletes : list[str]
        Deletes confirmed and not yet picked up by a worker step
    viewer : DetailViewerState
        Full-screen viewer
    dialog : ConfirmationDialogState
        Delete confirmation
    revision : int
        Bumped on every change so the card grid re-renders
    """

    status: GalleryStatus = GalleryStatus.LOADING
    designs: list[NailDesign] = field(default_factory=list)
    sort_order: str = "desc"
    error: str = ""
    notice: str = ""
    downloading: set[str] = field(default_factory=set)
    deleting: set[str] = field(default_factory=set)
    pending_downloads: list[str] = field(default_factory=list)
    pending_deletes: list[str] = field(default_factory=list)
    viewer: DetailViewerState = field(default_factory=DetailViewerState)
    dialog: ConfirmationDialogState = field(default_factory=ConfirmationDialogState)
    revision: int = 0

    def find(self, design_id: str) -> NailDesign | None:
        """Return the design with ``design_id`` from the current listing."""
        for design in self.designs:
            if design.id == design_id:
                return design
        return None

    def replace_designs(self, designs: list[NailDesign]) -> None:
        """Swap in a freshly fetched listing, discarding the previous one."""
        self.designs = list(designs)
        self.status = GalleryStatus.LOADED if self.designs else GalleryStatus.EMPTY
        self.error = ""

    def remove_design(self, design_id: str) -> bool:
        """Drop a deleted design locally.

        Closes the viewer if it was showing that design.

        Returns:
            True if the design was in the listing
        """
        before = len(self.designs)
        self.designs = [d for d in self.designs if d.id != design_id]
        removed = len(self.designs) != before

        if self.viewer.design is not None and self.viewer.design.id == design_id:
            self.viewer.close()

        if removed and not self.designs and self.status == GalleryStatus.LOADED:
            self.status = GalleryStatus.EMPTY
        return removed

    def touch(self) -> None:
        self.revision += 1

    def __repr__(self) -> str:
        return (
            f"GalleryState(status={self.status.value}, designs={len(self.designs)}, "
            f"sort={self.sort_order})"
        )


# Sort order choices as (label, value) pairs
SORT_ORDER_CHOICES: list[tuple[str, str]] = [
    ("Más recientes primero", "desc"),
    ("Más antiguos primero", "asc"),
]

# User-facing messages
GENERATE_ERROR = "Error al generar la imagen"
DELETE_ERROR = "Error al eliminar la imagen. Por favor intenta de nuevo."
DOWNLOAD_ERROR = "Error al descargar la imagen. Por favor intenta de nuevo."
LOAD_ERROR_PREFIX = "No se pudieron cargar los diseños"
EMPTY_GALLERY_MESSAGE = "No hay diseños disponibles en este momento."
DELETE_DIALOG_TITLE = "Eliminar imagen"
DELETE_DIALOG_MESSAGE = (
    "¿Estás seguro de que quieres eliminar esta imagen? Esta acción no se puede deshacer."
)

# Card and action commands dispatched through the hidden action box
GALLERY_ACTIONS = ("view", "download", "delete")


def describe_error(error: Any) -> str:
    """Short text for an exception, falling back to its class name."""
    text = str(error).strip()
    return text or type(error).__name__
