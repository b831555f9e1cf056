from pydantic import BaseModel
from typing import List, Literal, Dict, Any

class KpiOut(BaseModel):
    label: str
    prefix: str = ""
    suffix: str = ""
    baseline: float
    value: float
    # Signed % vs prior period; the sign picks the up/down treatment.
    delta: float
    caption: str

class TimelinePointOut(BaseModel):
    period: str
    engagement: float
    velocity: float
    sentiment: float

class PipelineStageOut(BaseModel):
    stage: str
    value: float

class ChannelShareOut(BaseModel):
    name: str
    value: float

class SnapshotResponse(BaseModel):
    tick: int
    generatedAt: str
    kpis: List[KpiOut]
    timeline: List[TimelinePointOut]
    pipeline: List[PipelineStageOut]
    channelMix: List[ChannelShareOut]

class KpiCard(BaseModel):
    label: str
    caption: str
    value: float
    display: str
    delta: float
    deltaDisplay: str
    trend: Literal["up", "down"]

class KpiGrid(BaseModel):
    kind: Literal["kpi_grid"]
    tick: int
    cards: List[KpiCard]

class DashboardResponse(BaseModel):
    tick: int
    generatedAt: str
    engineRunning: bool
    kpis: KpiGrid
    # Rendered widgets differ by kind (bar / line_area / donut); kept loose.
    widgets: List[Dict[str, Any]]
