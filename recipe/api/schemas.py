"""
Pydantic Schemas for API Request/Response Models.

These schemas define the structure of data flowing through the API,
providing automatic validation and documentation.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from recipe.engine.executor import RunStatus


# ============================================================
# Recipe Schemas
# ============================================================

class RecipeInfo(BaseModel):
    """Information about a registered recipe."""
    name: str
    description: str
    steps: List[str]


class RecipeListResponse(BaseModel):
    """Response listing all registered recipes."""
    recipes: List[RecipeInfo]
    total: int


# ============================================================
# Run Schemas
# ============================================================

class RunRequest(BaseModel):
    """Request to run a registered recipe."""
    values: Dict[str, Any] = Field(
        default_factory=dict,
        description="Initial values of the recipe state"
    )
    enable_telemetry: Optional[bool] = Field(
        None,
        description="Record telemetry events (defaults to the server setting)"
    )
    correlation_id: Optional[str] = Field(
        None,
        description="Use this correlation id instead of generating one"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "values": {"number": 4},
                "enable_telemetry": True,
            }
        }


class TelemetryEventEntry(BaseModel):
    """A single telemetry event of a run."""
    event: str
    correlation_id: Optional[str]
    step: Optional[str]
    elapsed_us: Optional[int]
    error: Any = None
    values: Dict[str, Any]
    recorded_at: str


class RunResponse(BaseModel):
    """Response after running a recipe."""
    recipe: str
    status: RunStatus
    correlation_id: Optional[str] = Field(None, description="Identifier of the run")
    result: Any = Field(None, description="Return value of handle_result")
    error: Any = Field(None, description="Return value of handle_error")
    failed_step: Optional[str] = None
    events: List[TelemetryEventEntry] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "recipe": "arithmetic",
                "status": "ok",
                "correlation_id": "6f1c2d1e-3b57-4b8e-9d0e-2f7c1a9b8e44",
                "result": 32,
                "error": None,
                "failed_step": None,
                "events": [
                    {
                        "event": "success",
                        "correlation_id": "6f1c2d1e-3b57-4b8e-9d0e-2f7c1a9b8e44",
                        "step": "square",
                        "elapsed_us": 12,
                        "error": None,
                        "values": {"number": 16},
                        "recorded_at": "2024-01-01T12:00:00",
                    }
                ],
            }
        }


# ============================================================
# Error Schemas
# ============================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int
