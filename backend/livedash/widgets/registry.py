# backend/livedash/widgets/registry.py
"""
Widget registry.

A fixed, ordered catalog of dashboard modules. Each widget carries a ``kind``
tag; ``render`` looks the tag up in ``_RENDERERS`` and hands the snapshot to
the matching function. Renderers only read the snapshot, so the same snapshot
always renders to the same dict.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from livedash.engine.errors import ConfigurationError, UnknownWidgetError
from livedash.engine.models import Snapshot

CHANNEL_PALETTE = ("#6200EE", "#00BCD4", "#26d4e9", "#8C9BC0")
LIVE_STATUS = "Live"


class WidgetKind(str, Enum):
    KPI_GRID = "kpi_grid"
    BAR = "bar"
    LINE_AREA = "line_area"
    DONUT = "donut"


class SeriesStyle(str, Enum):
    LINE = "line"
    DASHED = "dashed"
    AREA = "area"


@dataclass(frozen=True)
class Series:
    key: str
    name: str
    color: str
    style: SeriesStyle = SeriesStyle.LINE


@dataclass(frozen=True)
class Highlight:
    label: str
    value: str
    note: Optional[str] = None


@dataclass(frozen=True)
class Widget:
    id: str
    title: str
    description: str
    accessibility_label: str
    kind: WidgetKind
    columns: int = 1
    badge: Optional[str] = None
    footnote: Optional[str] = None
    series: Tuple[Series, ...] = field(default_factory=tuple)
    highlights: Tuple[Highlight, ...] = field(default_factory=tuple)


# ---------- renderers ----------

def _header(widget: Widget, snapshot: Snapshot) -> Dict[str, Any]:
    return {
        "id": widget.id,
        "kind": widget.kind.value,
        "title": widget.title,
        "description": widget.description,
        "ariaLabel": widget.accessibility_label,
        "columns": widget.columns,
        "badge": widget.badge,
        "footnote": widget.footnote,
        "highlights": [{"label": h.label, "value": h.value, "note": h.note} for h in widget.highlights],
        "status": LIVE_STATUS,
        "tick": snapshot.tick,
    }


def format_kpi_value(prefix: str, value: float, suffix: str) -> str:
    return f"{prefix}{value:.1f}{suffix}"


def format_delta(delta: float) -> str:
    sign = "+" if delta > 0 else ""
    return f"{sign}{delta:.1f}%"


def render_kpi_grid(snapshot: Snapshot, widget: Optional[Widget] = None) -> Dict[str, Any]:
    cards = [
        {
            "label": k.label,
            "caption": k.caption,
            "value": k.value,
            "display": format_kpi_value(k.prefix, k.value, k.suffix),
            "delta": k.delta,
            "deltaDisplay": format_delta(k.delta),
            "trend": "up" if k.delta >= 0 else "down",
        }
        for k in snapshot.kpis
    ]
    out = _header(widget, snapshot) if widget else {"kind": WidgetKind.KPI_GRID.value, "tick": snapshot.tick}
    out["cards"] = cards
    return out


def _render_bar(widget: Widget, snapshot: Snapshot) -> Dict[str, Any]:
    out = _header(widget, snapshot)
    out["categoryKey"] = "stage"
    out["series"] = [{"key": s.key, "name": s.name, "color": s.color} for s in widget.series]
    out["data"] = [{"stage": s.stage, "value": s.value} for s in snapshot.pipeline]
    return out


def _render_line_area(widget: Widget, snapshot: Snapshot) -> Dict[str, Any]:
    keys = [s.key for s in widget.series]
    out = _header(widget, snapshot)
    out["categoryKey"] = "period"
    out["series"] = [
        {"key": s.key, "name": s.name, "color": s.color, "style": s.style.value} for s in widget.series
    ]
    out["data"] = [
        {"period": p.period, **{k: getattr(p, k) for k in keys}} for p in snapshot.timeline
    ]
    return out


def _render_donut(widget: Widget, snapshot: Snapshot) -> Dict[str, Any]:
    out = _header(widget, snapshot)
    out["data"] = [
        {
            "name": c.name,
            "value": c.value,
            "display": f"{c.value:.1f}%",
            "color": CHANNEL_PALETTE[i % len(CHANNEL_PALETTE)],
        }
        for i, c in enumerate(snapshot.channel_mix)
    ]
    # Leading channel by current share; first one wins ties.
    out["primary"] = max(snapshot.channel_mix, key=lambda c: c.value).name if snapshot.channel_mix else None
    return out


_RENDERERS: Dict[WidgetKind, Callable[[Widget, Snapshot], Dict[str, Any]]] = {
    WidgetKind.KPI_GRID: lambda w, s: render_kpi_grid(s, w),
    WidgetKind.BAR: _render_bar,
    WidgetKind.LINE_AREA: _render_line_area,
    WidgetKind.DONUT: _render_donut,
}


def render(widget: Widget, snapshot: Snapshot) -> Dict[str, Any]:
    return _RENDERERS[widget.kind](widget, snapshot)


# ---------- registry ----------

class WidgetRegistry:
    def __init__(self, widgets: Sequence[Widget]):
        ids = [w.id for w in widgets]
        if len(set(ids)) != len(ids):
            raise ConfigurationError(f"duplicate widget ids: {ids}")
        for w in widgets:
            if w.kind not in _RENDERERS:
                raise ConfigurationError(f"no renderer for widget kind {w.kind!r}")
        self._widgets: Tuple[Widget, ...] = tuple(widgets)
        self._by_id: Dict[str, Widget] = {w.id: w for w in self._widgets}

    def __iter__(self) -> Iterator[Widget]:
        return iter(self._widgets)

    def __len__(self) -> int:
        return len(self._widgets)

    def __contains__(self, widget_id: object) -> bool:
        return widget_id in self._by_id

    def ids(self) -> List[str]:
        return [w.id for w in self._widgets]

    def get(self, widget_id: str) -> Widget:
        try:
            return self._by_id[widget_id]
        except KeyError:
            raise UnknownWidgetError(widget_id) from None

    def render(self, widget_id: str, snapshot: Snapshot) -> Dict[str, Any]:
        return render(self.get(widget_id), snapshot)


DEFAULT_WIDGETS: Tuple[Widget, ...] = (
    Widget(
        id="pipelineVelocity",
        title="Pipeline Velocity",
        description="Stage distribution and acceleration insights",
        accessibility_label="Bar chart showing opportunity velocity per pipeline stage",
        kind=WidgetKind.BAR,
        columns=1,
        badge="Momentum Score 82",
        series=(Series("value", "Velocity", "#6200EE"),),
        highlights=(Highlight("Lead score uplift", "+12%"), Highlight("Cycle time", "36h")),
    ),
    Widget(
        id="revenueInsights",
        title="Revenue Trajectory",
        description="Projected growth vs. actualized revenue",
        accessibility_label=(
            "Line chart showing projected versus actual revenue trajectory over the past 12 months"
        ),
        kind=WidgetKind.LINE_AREA,
        columns=2,
        badge="Forecast accuracy 94%",
        footnote="Live recalibration",
        series=(
            Series("engagement", "Actualized", "#00BCD4"),
            Series("velocity", "Projected", "#6200EE", SeriesStyle.DASHED),
            Series("sentiment", "Sentiment", "#8C9BC0", SeriesStyle.AREA),
        ),
        highlights=(
            Highlight("ARR", "$12.8M", "+18% YoY"),
            Highlight("Runway", "19.4 mo", "+4.2 mo saved"),
            Highlight("Confidence", "97.2%", "AI-adjusted"),
        ),
    ),
    Widget(
        id="conversionBreakdown",
        title="Conversion Echelons",
        description="Point-in-time conversion ratios with anomaly detection",
        accessibility_label="Stacked bar chart visualizing conversion rates across experimentation cohorts",
        kind=WidgetKind.LINE_AREA,
        columns=1,
        badge="Cohort View",
        footnote="Optimization cycles • 24h",
        series=(
            Series("velocity", "Velocity", "#6200EE", SeriesStyle.AREA),
            Series("engagement", "Engagement", "#00BCD4", SeriesStyle.AREA),
        ),
        highlights=(
            Highlight("Test Velocity", "+32%", "Experimental lift"),
            Highlight("Anomaly Risk", "2.4%", "Contained"),
        ),
    ),
    Widget(
        id="channelMix",
        title="Acquisition Mix",
        description="Channel contribution to net new ARR",
        accessibility_label="Donut chart showing acquisition channel distribution",
        kind=WidgetKind.DONUT,
        columns=1,
        badge="43 Segments",
        footnote="Weighted mix, auto-balanced",
    ),
    Widget(
        id="engagementTimeline",
        title="Engagement Timeline",
        description="User energy across lifecycle points",
        accessibility_label="Line chart tracking engagement timeline across user lifecycle checkpoints",
        kind=WidgetKind.LINE_AREA,
        columns=3,
        footnote="Adaptive cadence map",
        series=(Series("engagement", "Engagement", "#26d4e9", SeriesStyle.AREA),),
    ),
)


def default_registry() -> WidgetRegistry:
    return WidgetRegistry(DEFAULT_WIDGETS)
