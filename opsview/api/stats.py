import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from opsview.api.deps import get_stats_service
from opsview.api.stats_utils.stats_service import StatsService
from opsview.models.events.EventRequest import (
    ErrorResponse,
    IngestEventRequest,
    IngestEventResponse,
)
from opsview.models.stats.StatsSnapshot import StatsSnapshot

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR = {"error": "Internal Server Error"}


def internal_error() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=INTERNAL_ERROR
    )


@router.get(
    "/stats",
    status_code=status.HTTP_200_OK,
    response_model=StatsSnapshot,
    responses={500: {"model": ErrorResponse}},
)
async def get_stats(service: StatsService = Depends(get_stats_service)):
    """
    GET /api/stats - Dashboard counters

    Serves the cached snapshot when one exists (up to 10 seconds old),
    otherwise counts the event log and caches the result.

    Response:
        {"eventsCount": 5, "systemStatus": "Healthy", "lastUpdated": "..."}
    """
    try:
        snapshot = await service.get_stats()
    except Exception:
        logger.exception("Error fetching stats")
        return internal_error()

    return JSONResponse(content=snapshot.model_dump(mode="json", by_alias=True))


@router.post(
    "/events",
    status_code=status.HTTP_201_CREATED,
    response_model=IngestEventResponse,
    responses={500: {"model": ErrorResponse}},
)
async def ingest_event(
    body: IngestEventRequest,
    service: StatsService = Depends(get_stats_service),
):
    """Appends an event to the log and drops the cached stats snapshot."""
    try:
        await service.ingest_event(body.type, body.payload)
    except Exception:
        logger.exception("Error ingesting event")
        return internal_error()

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=IngestEventResponse(message="Event ingested").model_dump(),
    )
