from pydantic import BaseModel
from typing import Optional

class EngineStatus(BaseModel):
    running: bool
    intervalMs: int
    tick: int
    schedulerTicks: int
    lastUpdated: Optional[str] = None
