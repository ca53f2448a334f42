from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Union


class EndpointKind(Enum):
    """Upstream endpoints the gateway knows how to query."""

    CURRENT_WEATHER = "current_weather"
    FORECAST = "forecast"
    DAILY_FORECAST = "daily_forecast"
    AIR_QUALITY = "air_quality"
    BATCH_WEATHER = "batch_weather"

    @property
    def path(self) -> str:
        return _PATHS[self]

    @property
    def uses_units(self) -> bool:
        return self is not EndpointKind.AIR_QUALITY


_PATHS = {
    EndpointKind.CURRENT_WEATHER: "/weather",
    EndpointKind.FORECAST: "/forecast",
    EndpointKind.DAILY_FORECAST: "/forecast/daily",
    EndpointKind.AIR_QUALITY: "/air_pollution",
    EndpointKind.BATCH_WEATHER: "/group",
}


class ErrorKind(Enum):
    UPSTREAM_REJECTED = "upstream_rejected"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    REQUEST_CONSTRUCTION_FAILED = "request_construction_failed"
    TIMEOUT = "timeout"
    AGGREGATE_MEMBER_FAILED = "aggregate_member_failed"


class AggregatePolicy(Enum):
    ALL_OR_NOTHING = "all_or_nothing"
    BEST_EFFORT = "best_effort"


@dataclass(frozen=True)
class LogicalRequest:
    """One upstream query: endpoint kind plus string parameters."""

    kind: EndpointKind
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        normalized = {str(k): str(v) for k, v in self.params.items()}
        object.__setattr__(self, 'params', MappingProxyType(normalized))

    @classmethod
    def create(cls, kind: EndpointKind, **params) -> 'LogicalRequest':
        return cls(kind, {k: v for k, v in params.items() if v is not None})

    def describe(self) -> dict:
        return {'endpoint': self.kind.value, 'params': dict(self.params)}


@dataclass(frozen=True)
class Success:
    document: Any

    ok = True


@dataclass(frozen=True)
class Failure:
    """
    A classified failure.

    Aggregate failures carry the failing member in ``member`` together
    with its position and request; ``origin`` walks back to the member
    failure that started it.
    """

    kind: ErrorKind
    message: str
    status: Optional[int] = None
    request: Optional[LogicalRequest] = None
    member: Optional['Failure'] = None
    index: Optional[int] = None

    ok = False

    @property
    def origin(self) -> 'Failure':
        failure = self
        while failure.member is not None:
            failure = failure.member
        return failure


FetchResult = Union[Success, Failure]


@dataclass
class AggregateOutcome:
    documents: Optional[List[Any]] = None
    failure: Optional[Failure] = None
    outcomes: List[Optional[FetchResult]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failure is None
