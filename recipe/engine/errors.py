"""
Errors raised by the recipe engine.

Step failures are never raised: they are ordinary return values handed to
the recipe's own ``handle_error``. The exceptions below cover structural
problems that must stop a recipe before it can run.
"""

from typing import Optional, Sequence


class InvalidRecipe(Exception):
    """
    Raised when a recipe does not declare its steps, or does not define a
    single-argument method for each declared step.
    """

    def __init__(
        self,
        message: str,
        recipe_name: Optional[str] = None,
        missing: Sequence[str] = (),
    ):
        super().__init__(message)
        self.recipe_name = recipe_name
        self.missing = list(missing)

    @classmethod
    def no_steps(cls, recipe_name: str) -> "InvalidRecipe":
        message = (
            f"The recipe {recipe_name} doesn't define the steps to execute.\n\n"
            "To fix this, declare a `steps` class attribute. For example:\n\n"
            '    steps = ["validate", "save"]'
        )
        return cls(message, recipe_name=recipe_name)

    @classmethod
    def missing_steps(cls, recipe_name: str, missing: Sequence[str]) -> "InvalidRecipe":
        example = missing[0]
        message = (
            f"The recipe {recipe_name} doesn't have step definitions "
            f"for the following methods:\n\n    {list(missing)}\n\n"
            "To fix this, add the relevant method definitions. For example:\n\n"
            f"    def {example}(self, state):\n"
            "        # your code here\n"
            "        return new_state"
        )
        return cls(message, recipe_name=recipe_name, missing=missing)


class RecipeNotFound(KeyError):
    """Raised when a recipe name is not present in the registry."""

    def __init__(self, name: str, available: Sequence[str] = ()):
        super().__init__(name)
        self.name = name
        self.available = list(available)

    def __str__(self) -> str:
        return f"Recipe '{self.name}' not found. Available recipes: {self.available}"
