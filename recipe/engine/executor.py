"""
Recipe Executor.

The executor runs the steps of a recipe in order, threading the state from
one step to the next, and produces exactly one outcome per run: the result
of ``handle_result`` when every step succeeds, or the result of
``handle_error`` for the first step that fails.
"""

from typing import Any, Callable, Mapping, Optional, Tuple, Type, Union
from dataclasses import dataclass
from enum import Enum
import logging
import time

from recipe.engine.definition import Recipe
from recipe.engine.state import RunOptions, WorkflowState, generate_correlation_id
from recipe.engine.telemetry import DebugTelemetry


logger = logging.getLogger(__name__)


RecipeRef = Union[Recipe, Type[Recipe], str]
OptionsRef = Union[RunOptions, Mapping[str, Any], None]


class RunStatus(str, Enum):
    """Status of a finished recipe run."""
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True)
class RunOutcome:
    """
    Outcome of a recipe run.

    Attributes:
        status: OK if every step succeeded, ERROR otherwise
        value: Return value of ``handle_result`` or ``handle_error``
        correlation_id: Identifier of the run
        failed_step: Name of the step that failed (ERROR only)
    """
    status: RunStatus
    value: Any
    correlation_id: Optional[str] = None
    failed_step: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == RunStatus.OK

    def as_tuple(self) -> Tuple[Any, ...]:
        """Return ``("ok", correlation_id, result)`` or ``("error", error)``."""
        if self.ok:
            return (RunStatus.OK.value, self.correlation_id, self.value)
        return (RunStatus.ERROR.value, self.value)


def _continuation(result: Any) -> Optional[WorkflowState]:
    """Return the next state if ``result`` means "continue", else None."""
    if isinstance(result, WorkflowState):
        return result
    if (
        isinstance(result, tuple)
        and len(result) == 2
        and isinstance(result[0], str)
        and result[0] == RunStatus.OK.value
        and isinstance(result[1], WorkflowState)
    ):
        return result[1]
    return None


def _elapsed_us(started: float) -> int:
    return int((time.perf_counter() - started) * 1_000_000)


def resolve_recipe(recipe: RecipeRef) -> Recipe:
    """Turn a recipe instance, class or registered name into an instance."""
    if isinstance(recipe, Recipe):
        return recipe
    if isinstance(recipe, str):
        from recipe.registry import recipe_registry
        return recipe_registry.resolve(recipe).create()
    if isinstance(recipe, type) and issubclass(recipe, Recipe):
        return recipe()
    raise TypeError(f"Expected a Recipe, a Recipe subclass or a name, got {recipe!r}")


class Executor:
    """
    Synchronous recipe executor.

    Runs steps one at a time in the calling thread, invoking the telemetry
    observer around them when telemetry is enabled.

    Usage:
        executor = Executor(Arithmetic, options={"enable_telemetry": True})
        outcome = executor.run(initial_state(number=4))
    """

    def __init__(
        self,
        recipe: RecipeRef,
        options: OptionsRef = None,
        id_factory: Callable[[], str] = generate_correlation_id,
    ):
        """
        Initialize the executor.

        Args:
            recipe: Recipe instance, recipe class, or registered recipe name
            options: Run options overriding the ones stored on the state
            id_factory: Supplier of new correlation ids
        """
        self.recipe = resolve_recipe(recipe)
        self.options = RunOptions.coerce(options)
        self.id_factory = id_factory

    def run(self, initial_state: Optional[WorkflowState] = None) -> RunOutcome:
        """
        Execute the recipe starting from ``initial_state``.

        Args:
            initial_state: Starting state (defaults to an empty state)

        Returns:
            RunOutcome with the result of the recipe's terminal handler
        """
        if initial_state is None:
            initial_state = WorkflowState()

        recipe = self.recipe
        steps = recipe.step_names()
        options = initial_state.run_options.merge(self.options)
        correlation_id = options.correlation_id
        if correlation_id is None:
            correlation_id = self.id_factory()
        telemetry = options.telemetry or DebugTelemetry()
        enabled = options.enable_telemetry

        # Runs started from this state inherit telemetry, never the id
        options = options.model_copy(update={"telemetry": telemetry, "correlation_id": None})

        state = initial_state.model_copy(update={
            "recipe": recipe,
            "correlation_id": correlation_id,
            "run_options": options,
        })

        logger.debug(
            f"Running recipe {recipe.recipe_name()} "
            f"(correlation_id={correlation_id}, steps={list(steps)})"
        )

        if enabled:
            self._notify(telemetry.on_start, state)

        for step in steps:
            started = time.perf_counter()
            result = recipe.execute_step(step, state)
            elapsed = _elapsed_us(started)

            new_state = _continuation(result)
            if new_state is None:
                if enabled:
                    self._notify(telemetry.on_error, step, result, state, elapsed)
                logger.debug(
                    f"Recipe {recipe.recipe_name()} failed at step '{step}' "
                    f"(correlation_id={correlation_id})"
                )
                return RunOutcome(
                    status=RunStatus.ERROR,
                    value=recipe.handle_error(step, result, state),
                    correlation_id=correlation_id,
                    failed_step=step,
                )

            if enabled:
                self._notify(telemetry.on_success, step, new_state, elapsed)
            state = new_state

        if enabled:
            self._notify(telemetry.on_finish, state)

        return RunOutcome(
            status=RunStatus.OK,
            value=recipe.handle_result(state),
            correlation_id=correlation_id,
        )

    def _notify(self, callback: Callable[..., Any], *args: Any) -> None:
        """Invoke an observer callback; failures are logged, never raised."""
        try:
            callback(*args)
        except Exception as e:
            name = getattr(callback, "__name__", repr(callback))
            logger.warning(f"Telemetry callback {name} failed: {e!r}")


def run(
    recipe: RecipeRef,
    initial_state: Optional[WorkflowState] = None,
    options: OptionsRef = None,
) -> RunOutcome:
    """
    Convenience function to run a recipe.

    Args:
        recipe: Recipe instance, recipe class, or registered recipe name
        initial_state: Starting state (defaults to an empty state)
        options: ``enable_telemetry``, ``telemetry`` and ``correlation_id``

    Returns:
        RunOutcome
    """
    return Executor(recipe, options).run(initial_state)
