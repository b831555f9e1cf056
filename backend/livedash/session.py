# backend/livedash/session.py
"""
One dashboard session: the store, its scheduler, the widget catalog and the
visibility map, wired together. This is the surface the HTTP layer talks to.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import Request

from livedash.engine.config import SimulationConfig
from livedash.engine.models import Snapshot
from livedash.engine.random_walk import RandomSource, make_rng
from livedash.engine.scheduler import TickScheduler
from livedash.engine.store import MetricsStateStore
from livedash.settings import Settings
from livedash.widgets.registry import WidgetRegistry, default_registry, render, render_kpi_grid
from livedash.widgets.visibility import VisibilityController

logger = logging.getLogger(__name__)


class DashboardSession:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        config: Optional[SimulationConfig] = None,
        registry: Optional[WidgetRegistry] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.settings = settings or Settings()
        self.store = MetricsStateStore(config, rng or make_rng(self.settings.seed))
        self.scheduler = TickScheduler(self.store, self.settings.tick_interval_seconds)
        self.registry = registry or default_registry()
        self.visibility = VisibilityController(self.registry.ids())

    # ---- snapshot read ----
    def get_snapshot(self) -> Snapshot:
        return self.store.get_snapshot()

    # ---- control ----
    @property
    def engine_running(self) -> bool:
        return self.scheduler.is_running

    async def start_engine(self) -> None:
        self.scheduler.start()

    async def stop_engine(self) -> None:
        await self.scheduler.stop()

    def advance_once(self) -> Snapshot:
        return self.store.advance()

    def toggle_widget(self, widget_id: str) -> bool:
        visible = self.visibility.toggle(widget_id)
        logger.info("widget %s %s", widget_id, "shown" if visible else "hidden")
        return visible

    def is_widget_visible(self, widget_id: str) -> bool:
        return self.visibility.is_visible(widget_id)

    # ---- composition ----
    def render_dashboard(self) -> Dict[str, Any]:
        # Read the snapshot once so the KPI grid and all widgets share a tick.
        snap = self.get_snapshot()
        return {
            "tick": snap.tick,
            "generatedAt": snap.generated_at.isoformat(),
            "engineRunning": self.engine_running,
            "kpis": render_kpi_grid(snap),
            "widgets": [render(self.registry.get(wid), snap) for wid in self.visibility.visible_ids()],
        }


def get_session(request: Request) -> DashboardSession:
    return request.app.state.session
