"""View routing, overlay and request-generation state for a browsing session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Literal

logger = logging.getLogger(__name__)

Severity = Literal["info", "error"]


class ViewState(str, Enum):
    """The four mutually exclusive main views."""

    SEARCH = "search"
    RESULTS = "results"
    SERIES_DETAIL = "series-detail"
    MOVIE_DETAIL = "movie-detail"


class FlowKind(str, Enum):
    SEARCH = "search"
    SERIES = "series"
    MOVIE = "movie"
    TRAILER = "trailer"


@dataclass(frozen=True, slots=True)
class NavigationContext:
    """Records which series, if any, the current detail flow came from."""

    current_series_id: int | None = None

    def with_series(self, series_id: int) -> "NavigationContext":
        return replace(self, current_series_id=series_id)

    def cleared(self) -> "NavigationContext":
        return replace(self, current_series_id=None)


@dataclass(slots=True)
class AlertState:
    message: str
    title: str = "Notice"
    severity: Severity = "info"


@dataclass(slots=True)
class TrailerState:
    video_key: str
    embed_url: str


class ViewRouter:
    """Keeps exactly one main view active."""

    def __init__(self, initial: ViewState = ViewState.SEARCH):
        self._active = initial
        self.scroll_top = 0
        self.transitions = 0

    @property
    def active(self) -> ViewState:
        return self._active

    def is_visible(self, view: ViewState) -> bool:
        return self._active is view

    def visibility(self) -> dict[ViewState, bool]:
        return {view: view is self._active for view in ViewState}

    def show(self, view: ViewState) -> None:
        """Activate ``view`` and scroll back to the top."""

        if view is not self._active:
            logger.info("View transition %s -> %s", self._active.value, view.value)
        self._active = view
        self.scroll_top = 0
        self.transitions += 1


class OverlayManager:
    """Loading indicator, alert dialog and trailer modal.

    Overlays are layered above whichever view is active; nothing here
    touches the :class:`ViewRouter`.
    """

    def __init__(self) -> None:
        self.alert: AlertState | None = None
        self.trailer: TrailerState | None = None
        self._busy: set[FlowKind] = set()

    @property
    def loading(self) -> bool:
        return bool(self._busy)

    def set_loading(self, kind: FlowKind, active: bool) -> None:
        if active:
            self._busy.add(kind)
        else:
            self._busy.discard(kind)

    def show_alert(
        self, message: str, *, severity: Severity = "info", title: str = "Notice"
    ) -> None:
        self.alert = AlertState(message=message, title=title, severity=severity)

    def close_alert(self) -> None:
        self.alert = None

    def open_trailer(self, video_key: str, embed_url: str) -> None:
        self.trailer = TrailerState(video_key=video_key, embed_url=embed_url)

    def close_trailer(self) -> None:
        # Dropping the state removes the embed source, which stops playback.
        self.trailer = None


# Flows that replace the active view; starting one abandons the others.
NAVIGATING_FLOWS = frozenset({FlowKind.SEARCH, FlowKind.SERIES, FlowKind.MOVIE})


@dataclass(slots=True)
class FlowTracker:
    """Issues per-flow generation tokens so stale responses can be dropped.

    Loading for a flow kind stays on while its most recent generation is
    outstanding; completing an older generation never touches it. Starting
    a navigating flow supersedes every other navigating flow still in
    flight, since only one of them can own the active view.
    """

    overlays: OverlayManager
    _latest: dict[FlowKind, int] = field(default_factory=dict)

    def begin(self, kind: FlowKind, *, show_loading: bool = True) -> int:
        if kind in NAVIGATING_FLOWS:
            self.invalidate(*(NAVIGATING_FLOWS - {kind}))
        generation = self._latest.get(kind, 0) + 1
        self._latest[kind] = generation
        self.overlays.set_loading(kind, show_loading)
        return generation

    def is_current(self, kind: FlowKind, generation: int) -> bool:
        return self._latest.get(kind) == generation

    def finish(self, kind: FlowKind, generation: int) -> None:
        if self.is_current(kind, generation):
            self.overlays.set_loading(kind, False)
        else:
            logger.debug(
                "Ignoring completion of stale %s flow generation %s",
                kind.value,
                generation,
            )

    def invalidate(self, *kinds: FlowKind) -> None:
        """Mark outstanding flows of ``kinds`` stale and drop their loading."""

        for kind in kinds:
            self._latest[kind] = self._latest.get(kind, 0) + 1
            self.overlays.set_loading(kind, False)

    def invalidate_all(self) -> None:
        self.invalidate(*FlowKind)

    def latest(self, kind: FlowKind) -> int:
        return self._latest.get(kind, 0)
