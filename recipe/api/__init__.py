"""
API package - FastAPI routes and schemas.
"""

from recipe.api.routes import recipes

__all__ = ["recipes"]
