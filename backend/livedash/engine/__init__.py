from .config import (  # noqa: F401
    ChannelConfig,
    KpiSeed,
    PipelineConfig,
    SeedRange,
    SimulationConfig,
    TimelineConfig,
)
from .errors import (  # noqa: F401
    ConfigurationError,
    InvariantViolation,
    SchedulerStateError,
    UnknownWidgetError,
)
from .models import ChannelShare, Kpi, PipelineStage, Snapshot, TimelinePoint  # noqa: F401
from .normalizer import normalize  # noqa: F401
from .random_walk import SequenceRandom, WalkSpec, make_rng, step  # noqa: F401
from .scheduler import TickScheduler  # noqa: F401
from .store import MetricsStateStore  # noqa: F401
