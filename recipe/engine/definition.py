"""
Recipe Definition for the Recipe Engine.

A recipe is a class that lists its steps by name and defines one method per
step. Each step method receives the current state and returns either a new
state (to continue) or any other value (to fail).

Steps are resolved into a step table once, when the class is defined. A
class that lists a step without a matching single-argument method raises
``InvalidRecipe`` right there, so a malformed recipe can never be run.

Usage:
    class Arithmetic(Recipe):
        steps = ["square", "double"]

        def square(self, state):
            return state.assign("number", state.get("number") ** 2)

        def double(self, state):
            return state.assign("number", state.get("number") * 2)

        def handle_result(self, state):
            return state.get("number")

        def handle_error(self, step, error, state):
            return error
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple
import inspect

from recipe.engine.errors import InvalidRecipe
from recipe.engine.state import WorkflowState


class ValidationStatus(str, Enum):
    """Outcome of validating a recipe class."""
    OK = "ok"
    MISSING_STEPS = "missing"
    NO_STEPS_DEFINED = "no_steps_defined"


@dataclass(frozen=True)
class ValidationResult:
    """Result of ``check_recipe``."""
    status: ValidationStatus
    missing: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == ValidationStatus.OK


def _declared_steps(cls: type) -> Optional[List[str]]:
    """Return the step names declared by ``cls``, or None if it declares none."""
    provider = getattr(cls, "steps", None)
    if provider is None:
        return None
    names = provider() if callable(provider) else provider
    if isinstance(names, str):
        return [names]
    return list(names)


def _resolve_step(cls: type, name: str) -> Optional[Any]:
    """
    Find the raw class attribute implementing step ``name``.

    Plain functions and classmethods get their first argument bound, so
    they must accept exactly one more. Staticmethods and other callables
    must accept exactly one argument.

    Returns:
        The attribute as stored on the class, or None if it is missing or
        does not accept a single state argument
    """
    raw = inspect.getattr_static(cls, name, None)
    if raw is None:
        return None

    binds_first = isinstance(raw, classmethod) or inspect.isfunction(raw)
    if isinstance(raw, (staticmethod, classmethod)):
        func = raw.__func__
    elif callable(raw):
        func = raw
    else:
        return None

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None

    params = list(signature.parameters.values())
    if binds_first:
        if not params:
            return None
        if params[0].kind != inspect.Parameter.VAR_POSITIONAL:
            params = params[1:]

    try:
        signature.replace(parameters=params).bind(None)
    except TypeError:
        return None
    return raw


def _bind(raw: Any, instance: "Recipe") -> Any:
    if isinstance(raw, (staticmethod, classmethod)) or inspect.isfunction(raw):
        return raw.__get__(instance, type(instance))
    return raw


def check_recipe(cls: type) -> ValidationResult:
    """
    Check that every step declared by ``cls`` has an implementation.

    Missing steps are reported once each, in declaration order.
    """
    names = _declared_steps(cls)
    if names is None:
        return ValidationResult(ValidationStatus.NO_STEPS_DEFINED)

    missing: List[str] = []
    for name in names:
        if name not in missing and _resolve_step(cls, name) is None:
            missing.append(name)

    if missing:
        return ValidationResult(ValidationStatus.MISSING_STEPS, tuple(missing))
    return ValidationResult(ValidationStatus.OK)


def validate_recipe(cls: type) -> None:
    """
    Validate a recipe class.

    Raises:
        InvalidRecipe: If no steps are declared or some lack an implementation
    """
    result = check_recipe(cls)
    name = _recipe_name(cls)
    if result.status == ValidationStatus.NO_STEPS_DEFINED:
        raise InvalidRecipe.no_steps(name)
    if result.status == ValidationStatus.MISSING_STEPS:
        raise InvalidRecipe.missing_steps(name, result.missing)


def _recipe_name(cls: type) -> str:
    return getattr(cls, "name", None) or cls.__qualname__


class Recipe(ABC):
    """
    Base class for recipes.

    Subclasses declare ``steps`` and implement one method per step plus
    ``handle_result`` and ``handle_error``. Pass ``abstract=True`` in the
    class statement to define a partial base class that is not validated.

    Attributes:
        name: Human-readable name (defaults to the class qualname)
        steps: Ordered step names
    """

    name: ClassVar[Optional[str]] = None
    steps: ClassVar[Sequence[str]]
    _step_table: ClassVar[Dict[str, Any]] = {}

    def __init_subclass__(cls, abstract: bool = False, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        if abstract:
            return
        validate_recipe(cls)
        cls._step_table = {
            step: _resolve_step(cls, step) for step in _declared_steps(cls)
        }

    @classmethod
    def recipe_name(cls) -> str:
        return _recipe_name(cls)

    @classmethod
    def step_names(cls) -> Tuple[str, ...]:
        """Return the ordered step names of this recipe."""
        return tuple(_declared_steps(cls) or ())

    def execute_step(self, step: str, state: WorkflowState) -> Any:
        """Run a single step against ``state`` and return its raw result."""
        raw = type(self)._step_table.get(step)
        if raw is None:
            raise InvalidRecipe.missing_steps(self.recipe_name(), [step])
        return _bind(raw, self)(state)

    @abstractmethod
    def handle_result(self, state: WorkflowState) -> Any:
        """Invoked after the last step; receives the final state."""

    @abstractmethod
    def handle_error(self, step: str, error: Any, state: WorkflowState) -> Any:
        """
        Invoked when a step fails.

        Receives the name of the failed step, the value it returned and the
        state as it was before the step ran.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(steps={list(self.step_names())})"
