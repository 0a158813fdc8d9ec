"""
Recipe Registry.

The registry maps names to recipe classes so runs can be started by name,
for example from the HTTP API. Recipes are validated when registered.
"""

from typing import Any, Dict, Iterator, List, Optional, Type
from dataclasses import dataclass
import logging

from recipe.engine.definition import Recipe, validate_recipe
from recipe.engine.errors import RecipeNotFound


logger = logging.getLogger(__name__)


@dataclass
class RegisteredRecipe:
    """
    A registered recipe.

    Attributes:
        name: Unique name in the registry
        recipe_cls: The recipe class
        description: Human-readable description
    """
    name: str
    recipe_cls: Type[Recipe]
    description: str = ""

    @property
    def steps(self) -> List[str]:
        return list(self.recipe_cls.step_names())

    def create(self) -> Recipe:
        """Instantiate the recipe."""
        return self.recipe_cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "steps": self.steps,
        }


class RecipeRegistry:
    """
    Registry for recipe classes.

    Usage:
        registry = RecipeRegistry()

        @registry.register("arithmetic")
        class Arithmetic(Recipe):
            ...

        registered = registry.resolve("arithmetic")
    """

    def __init__(self):
        self._recipes: Dict[str, RegisteredRecipe] = {}

    def register(self, name: Optional[str] = None, description: str = ""):
        """
        Class decorator registering a recipe.

        Args:
            name: Registry name (defaults to the recipe name)
            description: Description (defaults to the class docstring)
        """
        def decorator(cls: Type[Recipe]) -> Type[Recipe]:
            self.add(cls, name=name, description=description)
            return cls

        return decorator

    def add(
        self,
        recipe_cls: Type[Recipe],
        name: Optional[str] = None,
        description: str = "",
    ) -> RegisteredRecipe:
        """
        Register a recipe class (non-decorator version).

        Raises:
            InvalidRecipe: If the class fails validation
        """
        validate_recipe(recipe_cls)
        recipe_name = name or recipe_cls.recipe_name()
        desc = description or recipe_cls.__doc__ or ""
        registered = RegisteredRecipe(
            name=recipe_name,
            recipe_cls=recipe_cls,
            description=desc.strip(),
        )
        self._recipes[recipe_name] = registered
        logger.debug(f"Registered recipe: {recipe_name} {registered.steps}")
        return registered

    def get(self, name: str) -> Optional[RegisteredRecipe]:
        """Get a registered recipe by name."""
        return self._recipes.get(name)

    def resolve(self, name: str) -> RegisteredRecipe:
        """
        Get a registered recipe by name.

        Raises:
            RecipeNotFound: If no recipe is registered under ``name``
        """
        registered = self.get(name)
        if registered is None:
            raise RecipeNotFound(name, available=list(self._recipes))
        return registered

    def remove(self, name: str) -> bool:
        """Remove a recipe from the registry."""
        if name in self._recipes:
            del self._recipes[name]
            return True
        return False

    def list_recipes(self) -> List[Dict[str, Any]]:
        """List all registered recipes with their metadata."""
        return [r.to_dict() for r in self._recipes.values()]

    def has(self, name: str) -> bool:
        return name in self._recipes

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._recipes)

    def __iter__(self) -> Iterator[RegisteredRecipe]:
        return iter(self._recipes.values())


# Global recipe registry instance
recipe_registry = RecipeRegistry()


def register_recipe(name: Optional[str] = None, description: str = ""):
    """
    Convenience decorator to register a recipe in the global registry.

    Usage:
        @register_recipe("arithmetic")
        class Arithmetic(Recipe):
            ...
    """
    return recipe_registry.register(name, description)


def get_recipe(name: str) -> Optional[RegisteredRecipe]:
    """Get a recipe from the global registry."""
    return recipe_registry.get(name)
