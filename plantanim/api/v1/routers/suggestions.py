"""
API router for suggestion endpoints.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, HTTPException, Path, Query

from plantanim.api.dependencies import AdvisoryServiceDep
from plantanim.api.v1.models.requests import SuggestionsRequest
from plantanim.api.v1.models.responses import AckResponse, SuggestionsResponse
from plantanim.domain.models import (
    CropContext,
    FarmTasksContext,
    LocationContext,
)
from plantanim.infrastructure.weather_client import WeatherAPIError
from plantanim.services.domain.suggestion_engine import SUGGESTION_DISCLAIMER


router = APIRouter(
    prefix="/suggestions",
    tags=["suggestions"],
)


@router.post(
    "",
    response_model=SuggestionsResponse,
    summary="Evaluate suggestions for a weather snapshot",
    description="""
    Run the weather rules against a caller-supplied snapshot.

    Risk warnings (typhoon, heavy rain, strong wind, multiple risks) come
    first, followed by farming advice and schedule suggestions. Expired
    suggestions and ones the farmer dismissed are left out.
    """,
)
async def evaluate_suggestions(
    body: SuggestionsRequest,
    advisory_service: AdvisoryServiceDep,
) -> SuggestionsResponse:
    crop_context = None
    if body.crop_ids is not None:
        crop_context = CropContext(selected_crop_ids=frozenset(body.crop_ids))

    suggestions = await advisory_service.get_suggestions(
        weather=body.weather,
        location=body.location,
        crop_context=crop_context,
        farm_tasks=FarmTasksContext(tasks=body.farm_tasks),
        now=body.now,
    )
    return SuggestionsResponse(suggestions=suggestions, disclaimer=SUGGESTION_DISCLAIMER)


@router.get(
    "/live",
    response_model=SuggestionsResponse,
    summary="Suggestions from the live forecast",
    description="""
    Fetch the forecast for a municipality and evaluate the rules against it.
    Unknown municipalities fall back to the default location.
    """,
    responses={
        502: {"description": "Weather provider unavailable"},
    },
)
async def live_suggestions(
    advisory_service: AdvisoryServiceDep,
    municipality: Annotated[str, Query(description="Municipality name")],
    barangay: Annotated[Optional[str], Query(description="Barangay name")] = None,
) -> SuggestionsResponse:
    """
    Raises:
        HTTPException: If the forecast cannot be fetched
    """
    location = LocationContext(municipality=municipality, barangay=barangay)
    try:
        weather, suggestions = await advisory_service.get_live_suggestions(location)
    except WeatherAPIError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=f"Failed to fetch weather data: {e.message}"
        )

    return SuggestionsResponse(
        suggestions=suggestions,
        disclaimer=SUGGESTION_DISCLAIMER,
        weather=weather,
    )


@router.post(
    "/{suggestion_id}/dismiss",
    response_model=AckResponse,
    summary="Dismiss a suggestion",
)
async def dismiss_suggestion(
    suggestion_id: Annotated[str, Path(description="Suggestion id")],
    advisory_service: AdvisoryServiceDep,
) -> AckResponse:
    saved = await advisory_service.dismiss_suggestion(suggestion_id)
    return AckResponse(id=suggestion_id, saved=saved)
