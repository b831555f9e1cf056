# backend/livedash/widgets/visibility.py
from __future__ import annotations

import threading
from typing import Dict, Iterable, List

from livedash.engine.errors import UnknownWidgetError


class VisibilityController:
    """
    Show/hide state per widget id, all visible by default.

    Knows nothing about the metrics store: toggling never triggers a tick and
    a tick never changes visibility.
    """

    def __init__(self, widget_ids: Iterable[str]):
        self._order: List[str] = list(widget_ids)
        self._visible: Dict[str, bool] = {wid: True for wid in self._order}
        self._lock = threading.Lock()

    def _require(self, widget_id: str) -> None:
        if widget_id not in self._visible:
            raise UnknownWidgetError(widget_id)

    def toggle(self, widget_id: str) -> bool:
        with self._lock:
            self._require(widget_id)
            self._visible[widget_id] = not self._visible[widget_id]
            return self._visible[widget_id]

    def set_visible(self, widget_id: str, visible: bool) -> None:
        with self._lock:
            self._require(widget_id)
            self._visible[widget_id] = bool(visible)

    def is_visible(self, widget_id: str) -> bool:
        self._require(widget_id)
        return self._visible[widget_id]

    def visible_ids(self) -> List[str]:
        with self._lock:
            return [wid for wid in self._order if self._visible[wid]]

    def as_dict(self) -> Dict[str, bool]:
        with self._lock:
            return dict(self._visible)
