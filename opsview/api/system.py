from fastapi import APIRouter, Depends, Response, status

from opsview.api.deps import get_metrics
from opsview.core.metrics import Metrics
from opsview.models.system.HealthResponse import HealthResponse

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthResponse)
async def health_check():
    # liveness only: answers even when the database or Redis is down
    return {"status": "ok"}


@router.get("/metrics", status_code=status.HTTP_200_OK)
async def metrics_endpoint(metrics: Metrics = Depends(get_metrics)):
    return Response(content=metrics.render(), media_type=metrics.content_type)
