import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from clausewise.schemas.retention import SweepResponse
from clausewise.services.retention_service import RetentionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["Retention"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def get_retention_service(request: Request) -> RetentionService:
    return request.app.state.retention_service


@router.api_route(
    "/cleanup-expired-contracts",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
)
async def cleanup_expired_contracts(
    request: Request,
    service: RetentionService = Depends(get_retention_service),
):
    """Run one retention sweep. Meant for an external scheduler; the body is ignored."""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    try:
        result = await service.sweep()
    except Exception as e:
        logger.exception(f"Cleanup error: {e}")
        return JSONResponse({"error": str(e)}, status_code=500, headers=CORS_HEADERS)

    body = SweepResponse(message=result.message, deleted=result.deleted)
    return JSONResponse(body.model_dump(), headers=CORS_HEADERS)
