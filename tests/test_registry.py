"""
Tests for the Recipe Registry.
"""

import pytest

from recipe.engine.definition import Recipe
from recipe.engine.errors import InvalidRecipe, RecipeNotFound
from recipe.engine.executor import run
from recipe.engine.state import initial_state
from recipe.registry import RecipeRegistry, RegisteredRecipe


class Greet(Recipe):
    """Say hello to someone."""

    steps = ["greet"]

    def greet(self, state):
        return state.assign("greeting", f"Hello, {state.get('who')}")

    def handle_result(self, state):
        return state.get("greeting")

    def handle_error(self, step, error, state):
        return error


class Partial(Recipe, abstract=True):
    steps = ["greet", "wave"]

    def greet(self, state):
        return state


@pytest.fixture
def registry():
    return RecipeRegistry()


class TestRecipeRegistry:
    """Tests for RecipeRegistry."""

    def test_add_and_get(self, registry):
        """Test registering a class and retrieving it."""
        registered = registry.add(Greet, name="greet")

        assert isinstance(registered, RegisteredRecipe)
        assert registry.get("greet") is registered
        assert registry.get("unknown") is None
        assert "greet" in registry
        assert len(registry) == 1

    def test_defaults_from_class(self, registry):
        """Test that name and description default to the class."""
        registered = registry.add(Greet)

        assert registered.name == "Greet"
        assert registered.description == "Say hello to someone."
        assert registered.steps == ["greet"]

    def test_register_decorator(self, registry):
        """Test the decorator form."""
        @registry.register("hello", description="Greets")
        class Hello(Greet):
            pass

        assert registry.has("hello")
        assert registry.resolve("hello").recipe_cls is Hello
        assert registry.resolve("hello").description == "Greets"

    def test_resolve_unknown(self, registry):
        """Test that resolving an unknown name lists the known ones."""
        registry.add(Greet, name="greet")

        with pytest.raises(RecipeNotFound) as exc_info:
            registry.resolve("missing")

        assert exc_info.value.name == "missing"
        assert exc_info.value.available == ["greet"]
        assert "Recipe 'missing' not found" in str(exc_info.value)

    def test_not_found_is_key_error(self, registry):
        with pytest.raises(KeyError):
            registry.resolve("missing")

    def test_invalid_recipe_rejected(self, registry):
        """Test that registering an incomplete recipe fails."""
        with pytest.raises(InvalidRecipe) as exc_info:
            registry.add(Partial, name="partial")

        assert exc_info.value.missing == ["wave"]
        assert "partial" not in registry

    def test_remove(self, registry):
        registry.add(Greet, name="greet")

        assert registry.remove("greet") is True
        assert registry.remove("greet") is False
        assert len(registry) == 0

    def test_list_recipes(self, registry):
        registry.add(Greet, name="greet", description="Greets")

        assert registry.list_recipes() == [
            {"name": "greet", "description": "Greets", "steps": ["greet"]},
        ]
        assert [r.name for r in registry] == ["greet"]

    def test_create_and_run(self, registry):
        """Test running a fresh instance of a registered recipe."""
        registered = registry.add(Greet, name="greet")
        outcome = run(registered.create(), initial_state(who="world"))

        assert outcome.value == "Hello, world"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
