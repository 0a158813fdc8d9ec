"""
Recipe API Routes.

Endpoints for listing registered recipes and running them.
"""

from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
import logging

from recipe.api.schemas import (
    ErrorResponse,
    RecipeInfo,
    RecipeListResponse,
    RunRequest,
    RunResponse,
    TelemetryEventEntry,
)
from recipe.config import settings
from recipe.engine.errors import RecipeNotFound
from recipe.engine.executor import Executor
from recipe.engine.state import initial_state
from recipe.engine.telemetry import DebugTelemetry, FanoutTelemetry, RecordingTelemetry
from recipe.registry import recipe_registry


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["Recipes"])


def _resolve(name: str):
    try:
        return recipe_registry.resolve(name)
    except RecipeNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get(
    "/",
    response_model=RecipeListResponse,
)
async def list_recipes() -> RecipeListResponse:
    """List all registered recipes."""
    recipes = [RecipeInfo(**r) for r in recipe_registry.list_recipes()]
    return RecipeListResponse(recipes=recipes, total=len(recipes))


@router.get(
    "/{name}",
    response_model=RecipeInfo,
    responses={404: {"model": ErrorResponse}},
)
async def get_recipe(name: str) -> RecipeInfo:
    """Get information about a specific recipe."""
    return RecipeInfo(**_resolve(name).to_dict())


@router.post(
    "/{name}/run",
    response_model=RunResponse,
    responses={404: {"model": ErrorResponse}},
)
def run_recipe(name: str, request: RunRequest) -> RunResponse:
    """
    Run a registered recipe with the given initial values.

    The run happens synchronously. When telemetry is enabled, the response
    carries the events recorded during the run.
    """
    registered = _resolve(name)

    enable_telemetry = request.enable_telemetry
    if enable_telemetry is None:
        enable_telemetry = settings.TELEMETRY_BY_DEFAULT

    recorder = RecordingTelemetry()
    options = {
        "enable_telemetry": enable_telemetry,
        "telemetry": FanoutTelemetry([DebugTelemetry(), recorder]),
    }
    if request.correlation_id is not None:
        options["correlation_id"] = request.correlation_id

    outcome = Executor(registered.create(), options).run(initial_state(**request.values))
    logger.info(
        f"Recipe {name} finished with status {outcome.status.value} "
        f"(correlation_id={outcome.correlation_id})"
    )

    return RunResponse(
        recipe=name,
        status=outcome.status,
        correlation_id=outcome.correlation_id,
        result=jsonable_encoder(outcome.value) if outcome.ok else None,
        error=None if outcome.ok else jsonable_encoder(outcome.value),
        failed_step=outcome.failed_step,
        events=[
            TelemetryEventEntry(**jsonable_encoder(e.to_dict()))
            for e in recorder.events
        ],
    )
