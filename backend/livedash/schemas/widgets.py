from pydantic import BaseModel
from typing import List, Literal, Optional

WidgetKindName = Literal["kpi_grid", "bar", "line_area", "donut"]

class WidgetInfo(BaseModel):
    id: str
    title: str
    description: str
    accessibilityLabel: str
    kind: WidgetKindName
    columns: int
    visible: bool

class WidgetCatalog(BaseModel):
    widgets: List[WidgetInfo]

class VisibilityUpdate(BaseModel):
    visible: bool

class VisibilityState(BaseModel):
    id: str
    visible: bool
    title: Optional[str] = None
