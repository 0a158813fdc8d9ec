"""
Workflows package - Sample recipes.

Importing this package registers the sample recipes in the global registry.
"""

from recipe.workflows.arithmetic import Arithmetic
from recipe.workflows.conversation import DeleteConversation, StartNewConversation

__all__ = [
    "Arithmetic",
    "DeleteConversation",
    "StartNewConversation",
]
