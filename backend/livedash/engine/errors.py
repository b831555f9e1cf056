# backend/livedash/engine/errors.py


class ConfigurationError(ValueError):
    """Invalid engine setup (bounds, spread, interval, duplicate ids)."""


class InvariantViolation(AssertionError):
    """A generated value escaped its declared bounds. Always a bug."""


class SchedulerStateError(RuntimeError):
    """Scheduler started twice, or started with no running event loop."""


class UnknownWidgetError(KeyError):
    def __init__(self, widget_id: str):
        super().__init__(widget_id)
        self.widget_id = widget_id

    def __str__(self) -> str:
        return f"unknown widget: {self.widget_id}"
