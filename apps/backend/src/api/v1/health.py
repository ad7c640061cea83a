from fastapi import APIRouter

from core.config import get_settings
from schemas.api import ApiResponse


router = APIRouter()


@router.get("/health", response_model=ApiResponse[dict[str, str]])
def health_check() -> ApiResponse[dict[str, str]]:
    """Health check endpoint for monitoring and load balancer health checks.

    Reports whether GitHub calls are authenticated, since unauthenticated
    access is limited to 60 requests per hour.
    """
    settings = get_settings()
    return ApiResponse(
        success=True,
        data={
            "status": "healthy",
            "message": f"{settings.APP_NAME} API is running",
            "github_auth": "token" if settings.GITHUB_TOKEN else "anonymous",
            "llm_provider": settings.LLM_PROVIDER,
        },
        message="Health check successful",
    )
