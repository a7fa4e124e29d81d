# Defines the standardized, internal data structures for the application.

from dataclasses import dataclass
from enum import Enum


class MetricTag(str, Enum):
    """Which metric justified picking a route as the slowest one."""
    SPEED = "speed"
    DURATION = "duration"


class ErrorKind(str, Enum):
    MISSING_CONFIGURATION = "missing_configuration"
    FETCH_ERROR = "fetch_error"
    INVALID_RESPONSE = "invalid_response"
    NO_RECORDS_FOUND = "no_records_found"
    NO_METRIC_AVAILABLE = "no_metric_available"


@dataclass(frozen=True)
class PipelineError:
    """Returned by a stage instead of its result when the run cannot go on."""
    kind: ErrorKind
    message: str


@dataclass
class NormalizedRoute:
    """A standardized representation of one route from the dataset."""
    id: str | None
    name: str
    speed: float | None = None
    duration: float | None = None


@dataclass
class SelectionResult:
    """The slowest route, tagged with the metric that made it the slowest."""
    route: NormalizedRoute
    metric: MetricTag

    @property
    def value(self) -> float:
        if self.metric is MetricTag.SPEED:
            return self.route.speed
        return self.route.duration


@dataclass
class DisplayFields:
    """What the report page shows for the slowest route."""
    id: str
    name: str
    metric_label: str
    metric_value: str
    hint: str

    @property
    def clause(self) -> str:
        return f"{self.metric_label} = {self.metric_value} ({self.hint})"


@dataclass
class AssembledReport:
    log_line: str
    display: DisplayFields


@dataclass
class ReportOutcome:
    """Result of one full run: either a report or the error that stopped it."""
    report: AssembledReport | None = None
    logged: str | None = None
    error: PipelineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
