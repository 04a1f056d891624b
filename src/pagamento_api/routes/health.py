"""Health check endpoint."""

from fastapi import APIRouter

from pagamento_api.models.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Liveness probe",
    response_model=HealthResponse,
)
def health() -> HealthResponse:
    return HealthResponse()
