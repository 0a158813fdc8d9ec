"""
State Management for the Recipe Engine.

The state flows from step to step. It is immutable: every step receives a
state and returns a new one built with ``assign``/``unassign``/``update``,
so earlier references keep seeing the values they were created with.
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union
from pydantic import BaseModel, Field, field_validator
import uuid

from recipe.engine.telemetry import Telemetry


def generate_correlation_id() -> str:
    """Generate a new random (v4) correlation id."""
    return str(uuid.uuid4())


class RunOptions(BaseModel):
    """
    Options controlling a single recipe run.

    Options stored on a state act as defaults; options passed to a run
    call override them for that call only. Only fields that were set
    explicitly take part in the override.

    Attributes:
        enable_telemetry: Invoke the telemetry observer around each step
        telemetry: Observer to use (defaults to the logging observer)
        correlation_id: Use this id instead of generating a new one
    """

    enable_telemetry: bool = False
    telemetry: Optional[Telemetry] = None
    correlation_id: Optional[str] = None

    class Config:
        frozen = True
        arbitrary_types_allowed = True
        extra = "forbid"

    def merge(self, overrides: "RunOptions") -> "RunOptions":
        """Return new options where every field set on ``overrides`` wins."""
        update = {name: getattr(overrides, name) for name in overrides.model_fields_set}
        return self.model_copy(update=update)

    @classmethod
    def coerce(cls, value: Union["RunOptions", Mapping[str, Any], None]) -> "RunOptions":
        """Build options from None, a mapping, or an existing instance."""
        if value is None:
            return cls()
        if isinstance(value, RunOptions):
            return value
        return cls(**dict(value))


def _frozen(values: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(values))


class WorkflowState(BaseModel):
    """
    The state threaded through a recipe run.

    ``values`` is a read-only mapping; writing to it raises ``TypeError``.
    Use ``assign``, ``unassign`` or ``update`` to derive a new state.

    Attributes:
        values: Results accumulated by the steps so far
        recipe: The recipe currently executing (set by the engine)
        correlation_id: Identifier of the current run (set by the engine)
        run_options: Default options for runs started from this state
    """

    values: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    recipe: Optional[Any] = None
    correlation_id: Optional[str] = None
    run_options: RunOptions = Field(default_factory=RunOptions)

    class Config:
        frozen = True
        arbitrary_types_allowed = True

    @field_validator("values", mode="after")
    @classmethod
    def freeze_values(cls, values: Mapping[str, Any]) -> Mapping[str, Any]:
        return _frozen(values)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value from the state."""
        return self.values.get(key, default)

    def assign(self, key: str, value: Any) -> "WorkflowState":
        """Return a new state with ``key`` set to ``value``."""
        return self.update({key: value})

    def unassign(self, key: str) -> "WorkflowState":
        """Return a new state without ``key``. Missing keys are ignored."""
        new_values = {k: v for k, v in self.values.items() if k != key}
        return self.model_copy(update={"values": _frozen(new_values)})

    def update(self, updates: Mapping[str, Any]) -> "WorkflowState":
        """Assign multiple values and return a new state."""
        return self.model_copy(update={"values": _frozen({**self.values, **updates})})

    def with_options(self, **options: Any) -> "WorkflowState":
        """Return a new state whose stored run options include ``options``."""
        merged = self.run_options.merge(RunOptions(**options))
        return self.model_copy(update={"run_options": merged})

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to a plain dictionary."""
        recipe_name = self.recipe.recipe_name() if self.recipe is not None else None
        return {
            "values": dict(self.values),
            "recipe": recipe_name,
            "correlation_id": self.correlation_id,
            "enable_telemetry": self.run_options.enable_telemetry,
        }


def initial_state(**values: Any) -> WorkflowState:
    """Return an empty recipe state, optionally preloaded with ``values``."""
    return WorkflowState(values=values)
