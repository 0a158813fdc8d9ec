"""
Recipe - compose multi-step, reversible workflows.

A recipe is an ordered list of steps run against an immutable state. The
first step that fails hands control to the recipe's own error handler,
where changes made by earlier steps can be rolled back.
"""

from recipe.engine import (
    WorkflowState,
    RunOptions,
    initial_state,
    Recipe,
    check_recipe,
    validate_recipe,
    InvalidRecipe,
    RecipeNotFound,
    Telemetry,
    NoOpTelemetry,
    DebugTelemetry,
    Executor,
    RunOutcome,
    RunStatus,
    run,
)
from recipe.registry import recipe_registry, register_recipe

__version__ = "0.5.0"

__all__ = [
    "WorkflowState",
    "RunOptions",
    "initial_state",
    "Recipe",
    "check_recipe",
    "validate_recipe",
    "InvalidRecipe",
    "RecipeNotFound",
    "Telemetry",
    "NoOpTelemetry",
    "DebugTelemetry",
    "Executor",
    "RunOutcome",
    "RunStatus",
    "run",
    "recipe_registry",
    "register_recipe",
]
