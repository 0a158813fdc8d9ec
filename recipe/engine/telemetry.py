"""
Telemetry observers for recipe runs.

When a run is started with ``enable_telemetry``, the executor calls the
observer before the first step, after every step, and after the last step
of a successful run. Observers return nothing the executor looks at.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
import logging

if TYPE_CHECKING:
    from recipe.engine.state import WorkflowState


logger = logging.getLogger(__name__)


class Telemetry(ABC):
    """Interface for objects receiving recipe run events."""

    @abstractmethod
    def on_start(self, state: "WorkflowState") -> None:
        """Invoked before the first step runs."""

    @abstractmethod
    def on_finish(self, state: "WorkflowState") -> None:
        """Invoked after the last step of a successful run."""

    @abstractmethod
    def on_success(self, step: str, state: "WorkflowState", elapsed_us: int) -> None:
        """Invoked after a step succeeds, with the state it returned."""

    @abstractmethod
    def on_error(
        self,
        step: str,
        error: Any,
        state: "WorkflowState",
        elapsed_us: int,
    ) -> None:
        """Invoked after a step fails, with the state it received."""


class NoOpTelemetry(Telemetry):
    """Observer that ignores every event."""

    def on_start(self, state: "WorkflowState") -> None:
        pass

    def on_finish(self, state: "WorkflowState") -> None:
        pass

    def on_success(self, step: str, state: "WorkflowState", elapsed_us: int) -> None:
        pass

    def on_error(self, step: str, error: Any, state: "WorkflowState", elapsed_us: int) -> None:
        pass


def _describe(state: "WorkflowState") -> str:
    recipe = state.recipe.recipe_name() if state.recipe is not None else None
    return f"recipe={recipe}"


class DebugTelemetry(Telemetry):
    """
    Built-in observer that reports run events as log lines.

    Start, finish and step events are logged at DEBUG; step errors are
    logged at ERROR.

    Example line:
        recipe=Arithmetic evt=step correlation_id=... step=square values={'number': 16} duration=9
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def on_start(self, state: "WorkflowState") -> None:
        self.log.debug(
            f"{_describe(state)} evt=start correlation_id={state.correlation_id} "
            f"values={dict(state.values)!r}"
        )

    def on_finish(self, state: "WorkflowState") -> None:
        self.log.debug(
            f"{_describe(state)} evt=end correlation_id={state.correlation_id} "
            f"values={dict(state.values)!r}"
        )

    def on_success(self, step: str, state: "WorkflowState", elapsed_us: int) -> None:
        self.log.debug(
            f"{_describe(state)} evt=step correlation_id={state.correlation_id} "
            f"step={step} values={dict(state.values)!r} duration={elapsed_us}"
        )

    def on_error(self, step: str, error: Any, state: "WorkflowState", elapsed_us: int) -> None:
        self.log.error(
            f"{_describe(state)} evt=error correlation_id={state.correlation_id} "
            f"step={step} error={error!r} values={dict(state.values)!r} duration={elapsed_us}"
        )


@dataclass
class TelemetryEvent:
    """A single event captured by ``RecordingTelemetry``."""
    event: str
    correlation_id: Optional[str]
    values: Dict[str, Any]
    step: Optional[str] = None
    elapsed_us: Optional[int] = None
    error: Any = None
    recorded_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.event,
            "correlation_id": self.correlation_id,
            "step": self.step,
            "elapsed_us": self.elapsed_us,
            "error": self.error,
            "values": self.values,
            "recorded_at": self.recorded_at.isoformat(),
        }


class RecordingTelemetry(Telemetry):
    """
    Observer that keeps every event in memory.

    Useful to return the trace of a run to a caller, or to assert on
    event ordering in tests.
    """

    def __init__(self):
        self.events: List[TelemetryEvent] = []

    def _record(self, event: str, state: "WorkflowState", **details: Any) -> None:
        self.events.append(TelemetryEvent(
            event=event,
            correlation_id=state.correlation_id,
            values=dict(state.values),
            **details,
        ))

    def on_start(self, state: "WorkflowState") -> None:
        self._record("start", state)

    def on_finish(self, state: "WorkflowState") -> None:
        self._record("finish", state)

    def on_success(self, step: str, state: "WorkflowState", elapsed_us: int) -> None:
        self._record("success", state, step=step, elapsed_us=elapsed_us)

    def on_error(self, step: str, error: Any, state: "WorkflowState", elapsed_us: int) -> None:
        self._record("error", state, step=step, elapsed_us=elapsed_us, error=error)

    @property
    def kinds(self) -> List[str]:
        """Event kinds in the order they were received."""
        return [e.event for e in self.events]


class FanoutTelemetry(Telemetry):
    """Observer that forwards every event to several observers, in order."""

    def __init__(self, observers: Iterable[Telemetry]):
        self.observers = list(observers)

    def on_start(self, state: "WorkflowState") -> None:
        for observer in self.observers:
            observer.on_start(state)

    def on_finish(self, state: "WorkflowState") -> None:
        for observer in self.observers:
            observer.on_finish(state)

    def on_success(self, step: str, state: "WorkflowState", elapsed_us: int) -> None:
        for observer in self.observers:
            observer.on_success(step, state, elapsed_us)

    def on_error(self, step: str, error: Any, state: "WorkflowState", elapsed_us: int) -> None:
        for observer in self.observers:
            observer.on_error(step, error, state, elapsed_us)
