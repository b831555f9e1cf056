# backend/livedash/api/engine.py
from fastapi import APIRouter, Depends, HTTPException

from livedash.engine.errors import SchedulerStateError
from livedash.schemas.engine import EngineStatus
from livedash.session import DashboardSession, get_session

router = APIRouter(prefix="/api/engine", tags=["engine"])


def _status(session: DashboardSession) -> EngineStatus:
    snap = session.get_snapshot()
    return EngineStatus(
        running=session.engine_running,
        intervalMs=session.settings.tick_interval_ms,
        tick=snap.tick,
        schedulerTicks=session.scheduler.ticks,
        lastUpdated=snap.generated_at.isoformat(),
    )


@router.get("/status", response_model=EngineStatus)
def engine_status(session: DashboardSession = Depends(get_session)):
    return _status(session)


# start/stop are async so the scheduler task lives on the app's event loop.
@router.post("/start", response_model=EngineStatus)
async def start_engine(session: DashboardSession = Depends(get_session)):
    try:
        await session.start_engine()
    except SchedulerStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _status(session)


@router.post("/stop", response_model=EngineStatus)
async def stop_engine(session: DashboardSession = Depends(get_session)):
    await session.stop_engine()
    return _status(session)


@router.post("/tick", response_model=EngineStatus)
async def tick(session: DashboardSession = Depends(get_session)):
    """Apply one advance by hand, independent of the scheduler."""
    session.advance_once()
    return _status(session)
