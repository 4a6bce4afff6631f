"""
Predictions Router

API endpoints for live fixture predictions.
"""

import re

from fastapi import APIRouter, Depends, HTTPException, Response

from src.application.dtos.dtos import (
    LivePredictionsResponseDTO,
    PredictionResponseDTO,
    ErrorResponseDTO,
)
from src.application.use_cases.live_predictions_use_case import (
    GetLivePredictionsUseCase,
    GetLivePredictionUseCase,
)
from src.api.dependencies import get_live_predictions_use_case, get_live_prediction_use_case
from src.domain.exceptions import InvalidIdentifierException, UpstreamFetchException
from src.utils.time_utils import get_timestamp_str


router = APIRouter(prefix="/predictions", tags=["Predictions"])

_FIXTURE_ID_PATTERN = re.compile(r"[+-]?[0-9]+")

SINGLE_PREDICTION_CACHE_CONTROL = "public, max-age=60"


def parse_fixture_id(raw: str) -> int:
    """
    Parse a fixture id path segment.

    Raises:
        InvalidIdentifierException: Unless the value is a base-10 integer, optionally signed
    """
    value = raw.strip()
    if not _FIXTURE_ID_PATTERN.fullmatch(value):
        raise InvalidIdentifierException(f"Invalid fixture id: '{raw}'")
    return int(value)


@router.get(
    "",
    response_model=LivePredictionsResponseDTO,
    responses={
        502: {"model": ErrorResponseDTO, "description": "Live feed unavailable"},
        500: {"model": ErrorResponseDTO, "description": "Internal server error"},
    },
    summary="Get predictions for all live fixtures",
    description="Returns win/draw/loss, goal market and temporal window predictions for every fixture currently live.",
)
async def get_live_predictions(
    use_case: GetLivePredictionsUseCase = Depends(get_live_predictions_use_case),
) -> LivePredictionsResponseDTO:
    """Get predictions for every live fixture."""
    try:
        predictions = await use_case.execute()
    except UpstreamFetchException as e:
        raise HTTPException(status_code=502, detail=str(e))

    return LivePredictionsResponseDTO(
        success=True,
        data=predictions,
        count=len(predictions),
        timestamp=get_timestamp_str(),
    )


@router.get(
    "/{fixture_id}",
    response_model=PredictionResponseDTO,
    responses={
        400: {"model": ErrorResponseDTO, "description": "Invalid fixture id"},
        404: {"model": ErrorResponseDTO, "description": "Fixture not in the live batch"},
        502: {"model": ErrorResponseDTO, "description": "Live feed unavailable"},
        500: {"model": ErrorResponseDTO, "description": "Internal server error"},
    },
    summary="Get prediction for a live fixture",
    description="Returns the prediction for a single fixture of the current live batch.",
)
async def get_live_prediction(
    fixture_id: str,
    response: Response,
    use_case: GetLivePredictionUseCase = Depends(get_live_prediction_use_case),
) -> PredictionResponseDTO:
    """Get prediction for a specific live fixture."""
    try:
        parsed_id = parse_fixture_id(fixture_id)
    except InvalidIdentifierException as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        prediction = await use_case.execute(parsed_id)
    except UpstreamFetchException as e:
        raise HTTPException(status_code=502, detail=str(e))

    if prediction is None:
        raise HTTPException(status_code=404, detail=f"Fixture not live: {parsed_id}")

    response.headers["Cache-Control"] = SINGLE_PREDICTION_CACHE_CONTROL
    return PredictionResponseDTO(
        success=True,
        data=prediction,
        timestamp=get_timestamp_str(),
    )
