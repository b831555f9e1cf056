# backend/livedash/api/widgets.py
from fastapi import APIRouter, Depends, HTTPException

from livedash.engine.errors import UnknownWidgetError
from livedash.schemas.widgets import VisibilityState, VisibilityUpdate, WidgetCatalog, WidgetInfo
from livedash.session import DashboardSession, get_session
from livedash.widgets.registry import Widget

router = APIRouter(prefix="/api/widgets", tags=["widgets"])


def _info(session: DashboardSession, w: Widget) -> WidgetInfo:
    return WidgetInfo(
        id=w.id,
        title=w.title,
        description=w.description,
        accessibilityLabel=w.accessibility_label,
        kind=w.kind.value,
        columns=w.columns,
        visible=session.is_widget_visible(w.id),
    )


def _get_widget(session: DashboardSession, widget_id: str) -> Widget:
    try:
        return session.registry.get(widget_id)
    except UnknownWidgetError:
        raise HTTPException(status_code=404, detail="Widget not found")


@router.get("", response_model=WidgetCatalog)
def list_widgets(session: DashboardSession = Depends(get_session)):
    return WidgetCatalog(widgets=[_info(session, w) for w in session.registry])


@router.get("/{widget_id}", response_model=WidgetInfo)
def get_widget(widget_id: str, session: DashboardSession = Depends(get_session)):
    return _info(session, _get_widget(session, widget_id))


@router.post("/{widget_id}/toggle", response_model=VisibilityState)
def toggle_widget(widget_id: str, session: DashboardSession = Depends(get_session)):
    w = _get_widget(session, widget_id)
    visible = session.toggle_widget(widget_id)
    return VisibilityState(id=widget_id, visible=visible, title=w.title)


@router.put("/{widget_id}/visibility", response_model=VisibilityState)
def set_widget_visibility(
    widget_id: str,
    body: VisibilityUpdate,
    session: DashboardSession = Depends(get_session),
):
    w = _get_widget(session, widget_id)
    session.visibility.set_visible(widget_id, body.visible)
    return VisibilityState(id=widget_id, visible=body.visible, title=w.title)
