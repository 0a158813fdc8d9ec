"""
Arithmetic Recipe.

Squares ``number`` and then doubles it. Anything that is not a number makes
the first step fail with ``{"error": "not_a_number"}``.
"""

from typing import Any, Dict, Tuple

from recipe.engine.definition import Recipe
from recipe.engine.state import WorkflowState
from recipe.registry import register_recipe


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@register_recipe("arithmetic", description="Square a number, then double it")
class Arithmetic(Recipe):
    """Square a number, then double it."""

    name = "Arithmetic"
    steps = ["square", "double"]

    def square(self, state: WorkflowState):
        number = state.get("number")
        if not _is_number(number):
            return {"error": "not_a_number"}
        return state.assign("number", number * number)

    def double(self, state: WorkflowState):
        number = state.get("number")
        if not _is_number(number):
            return {"error": "not_a_number"}
        return state.assign("number", number * 2)

    def handle_result(self, state: WorkflowState) -> Any:
        return state.get("number")

    def handle_error(self, step: str, error: Dict[str, Any], state: WorkflowState) -> Tuple[str, Any]:
        return (step, error)
