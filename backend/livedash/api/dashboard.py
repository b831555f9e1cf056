# backend/livedash/api/dashboard.py
from fastapi import APIRouter, Depends

from livedash.schemas.dashboard import DashboardResponse, SnapshotResponse
from livedash.session import DashboardSession, get_session

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def dashboard(session: DashboardSession = Depends(get_session)):
    """KPI grid plus every visible widget, rendered from one snapshot."""
    return session.render_dashboard()


@router.get("/snapshot", response_model=SnapshotResponse)
def snapshot(session: DashboardSession = Depends(get_session)):
    return session.get_snapshot().as_dict()
