from .registry import (  # noqa: F401
    DEFAULT_WIDGETS,
    Highlight,
    Series,
    SeriesStyle,
    Widget,
    WidgetKind,
    WidgetRegistry,
    default_registry,
    render,
    render_kpi_grid,
)
from .visibility import VisibilityController  # noqa: F401
