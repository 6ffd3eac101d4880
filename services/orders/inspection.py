"""Visual inspection annotator.

Two fixed 200×200 drawing surfaces are annotated: the ``image`` canvas
takes rectangles and the ``lens`` canvas takes circles.  A pointer gesture
(down, move, up) produces a *pending* shape that the caller confirms with a
severity and a note, or cancels.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping, Union

logger = logging.getLogger(__name__)

CANVAS_SIZE = 200
MIN_MARKER_SIZE = 2

SEVERITIES = ("critical", "attention")
DEFAULT_SEVERITY = "attention"

CANVAS_SHAPES = {"image": "rect", "lens": "circle"}

Severity = Literal["critical", "attention"]


class AnnotatorError(RuntimeError):
    """Annotator used in a way its current state does not allow."""


@dataclass(frozen=True)
class RectMarker:
    id: int
    x: float
    y: float
    width: float
    height: float
    type: str = DEFAULT_SEVERITY
    note: str = ""
    shape: str = field(default="rect", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "shape": self.shape,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "type": self.type,
            "note": self.note,
        }


@dataclass(frozen=True)
class CircleMarker:
    id: int
    cx: float
    cy: float
    r: float
    type: str = DEFAULT_SEVERITY
    note: str = ""
    shape: str = field(default="circle", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "shape": self.shape,
            "cx": self.cx,
            "cy": self.cy,
            "r": self.r,
            "type": self.type,
            "note": self.note,
        }


Marker = Union[RectMarker, CircleMarker]


def marker_from_dict(data: Mapping[str, Any]) -> Marker:
    shape = data.get("shape")
    severity = data.get("type") or DEFAULT_SEVERITY
    note = data.get("note") or ""
    if shape == "rect":
        return RectMarker(
            id=int(data["id"]),
            x=data["x"],
            y=data["y"],
            width=data["width"],
            height=data["height"],
            type=severity,
            note=note,
        )
    if shape == "circle":
        return CircleMarker(
            id=int(data["id"]),
            cx=data["cx"],
            cy=data["cy"],
            r=data["r"],
            type=severity,
            note=note,
        )
    raise ValueError(f"Unknown marker shape: {shape!r}")


@dataclass
class VisualInspection:
    general_observations: str = ""
    markers: list[Marker] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "VisualInspection":
        if not data:
            return cls()
        return cls(
            general_observations=data.get("general_observations") or "",
            markers=[marker_from_dict(item) for item in data.get("markers") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "general_observations": self.general_observations,
            "markers": [marker.to_dict() for marker in self.markers],
        }


@dataclass(frozen=True)
class PendingShape:
    """Finished gesture waiting for severity and note."""

    canvas: str
    geometry: dict[str, float]

    @property
    def shape(self) -> str:
        return CANVAS_SHAPES[self.canvas]


def _clamp(value: float) -> float:
    return min(max(float(value), 0.0), float(CANVAS_SIZE))


def _geometry(shape: str, start: tuple[float, float], end: tuple[float, float]) -> dict[str, float]:
    x0, y0 = start
    x1, y1 = end
    if shape == "rect":
        return {
            "x": min(x0, x1),
            "y": min(y0, y1),
            "width": abs(x1 - x0),
            "height": abs(y1 - y0),
        }
    return {"cx": x0, "cy": y0, "r": math.hypot(x1 - x0, y1 - y0)}


def _large_enough(shape: str, geometry: Mapping[str, float]) -> bool:
    if shape == "rect":
        return geometry["width"] > MIN_MARKER_SIZE and geometry["height"] > MIN_MARKER_SIZE
    return geometry["r"] > MIN_MARKER_SIZE


def _millis() -> int:
    return int(time.time() * 1000)


class InspectionAnnotator:
    """State machine behind the inspection drawing surfaces.

    States: idle → drawing → pending → idle.  Committed markers are kept in
    a list that is replaced (append / filter) on every change, so a list
    handed out earlier is never modified.
    """

    def __init__(
        self,
        inspection: VisualInspection | None = None,
        *,
        read_only: bool = False,
        clock: Callable[[], int] = _millis,
    ) -> None:
        inspection = inspection or VisualInspection()
        self._markers: list[Marker] = list(inspection.markers)
        self.general_observations = inspection.general_observations
        self.read_only = read_only
        self._clock = clock
        self._last_id = max((m.id for m in self._markers), default=0)

        self._canvas: str | None = None
        self._start: tuple[float, float] | None = None
        self._current: dict[str, float] | None = None
        self._pending: PendingShape | None = None

    # ─────────────────────────── state ───────────────────────────

    @property
    def markers(self) -> list[Marker]:
        return self._markers

    @property
    def drawing(self) -> bool:
        return self._start is not None

    @property
    def current_shape(self) -> dict[str, float] | None:
        """Geometry of the shape being drawn, for live preview."""
        return dict(self._current) if self._current else None

    @property
    def pending(self) -> PendingShape | None:
        return self._pending

    def markers_for(self, canvas: str) -> list[Marker]:
        shape = CANVAS_SHAPES[canvas]
        return [m for m in self._markers if m.shape == shape]

    # ─────────────────────────── gesture ─────────────────────────

    def pointer_down(self, canvas: str, x: float, y: float) -> None:
        if self.read_only:
            raise AnnotatorError("Inspection is read-only")
        if canvas not in CANVAS_SHAPES:
            raise AnnotatorError(f"Unknown canvas: {canvas}")
        if self._pending is not None:
            raise AnnotatorError("Confirm or cancel the pending marker first")
        self._canvas = canvas
        self._start = (_clamp(x), _clamp(y))
        self._current = _geometry(CANVAS_SHAPES[canvas], self._start, self._start)

    def pointer_move(self, x: float, y: float) -> None:
        if self._start is None:
            return
        self._current = _geometry(CANVAS_SHAPES[self._canvas], self._start, (_clamp(x), _clamp(y)))

    def pointer_up(self) -> PendingShape | None:
        """Finish the gesture; shapes at or below the size threshold are dropped."""
        if self._start is None:
            return None
        canvas, geometry = self._canvas, self._current
        self._reset_gesture()
        if not _large_enough(CANVAS_SHAPES[canvas], geometry):
            logger.debug("Discarded undersized %s shape %s", canvas, geometry)
            return None
        self._pending = PendingShape(canvas, geometry)
        return self._pending

    def pointer_leave(self) -> None:
        self._reset_gesture()

    def _reset_gesture(self) -> None:
        self._canvas = None
        self._start = None
        self._current = None

    # ─────────────────────────── commit ──────────────────────────

    def confirm(self, severity: str = DEFAULT_SEVERITY, note: str = "") -> Marker:
        if self._pending is None:
            raise AnnotatorError("No pending marker to confirm")
        if severity not in SEVERITIES:
            raise AnnotatorError(f"Unknown severity: {severity}")
        pending, self._pending = self._pending, None
        marker_id = self._next_id()
        if pending.shape == "rect":
            marker: Marker = RectMarker(id=marker_id, type=severity, note=note or "", **pending.geometry)
        else:
            marker = CircleMarker(id=marker_id, type=severity, note=note or "", **pending.geometry)
        self._markers = [*self._markers, marker]
        return marker

    def cancel(self) -> None:
        self._pending = None

    def remove(self, marker_id: int) -> bool:
        if self.read_only:
            raise AnnotatorError("Inspection is read-only")
        before = len(self._markers)
        self._markers = [m for m in self._markers if m.id != marker_id]
        return len(self._markers) != before

    def set_general_observations(self, text: str) -> None:
        if self.read_only:
            raise AnnotatorError("Inspection is read-only")
        self.general_observations = text or ""

    def draw(
        self,
        canvas: str,
        start: tuple[float, float],
        end: tuple[float, float],
        severity: str = DEFAULT_SEVERITY,
        note: str = "",
    ) -> Marker | None:
        """Replay a whole gesture and confirm it; ``None`` when too small."""
        self.pointer_down(canvas, *start)
        self.pointer_move(*end)
        if self.pointer_up() is None:
            return None
        return self.confirm(severity, note)

    def to_inspection(self) -> VisualInspection:
        return VisualInspection(
            general_observations=self.general_observations,
            markers=list(self._markers),
        )

    def _next_id(self) -> int:
        self._last_id = max(self._clock(), self._last_id + 1)
        return self._last_id
