from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get(
    "/healthz",
    tags=["Health"],
    status_code=status.HTTP_200_OK,
    response_class=PlainTextResponse,
    summary="Liveness check",
)
async def healthz() -> str:
    """Liveness endpoint; any method other than GET gets a 405."""
    return "ok"
