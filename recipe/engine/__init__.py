"""
Engine package - Core recipe execution components.
"""

from recipe.engine.state import WorkflowState, RunOptions, initial_state, generate_correlation_id
from recipe.engine.definition import (
    Recipe,
    ValidationResult,
    ValidationStatus,
    check_recipe,
    validate_recipe,
)
from recipe.engine.errors import InvalidRecipe, RecipeNotFound
from recipe.engine.telemetry import (
    Telemetry,
    NoOpTelemetry,
    DebugTelemetry,
    RecordingTelemetry,
    FanoutTelemetry,
)
from recipe.engine.executor import Executor, RunOutcome, RunStatus, run

__all__ = [
    "WorkflowState",
    "RunOptions",
    "initial_state",
    "generate_correlation_id",
    "Recipe",
    "ValidationResult",
    "ValidationStatus",
    "check_recipe",
    "validate_recipe",
    "InvalidRecipe",
    "RecipeNotFound",
    "Telemetry",
    "NoOpTelemetry",
    "DebugTelemetry",
    "RecordingTelemetry",
    "FanoutTelemetry",
    "Executor",
    "RunOutcome",
    "RunStatus",
    "run",
]
