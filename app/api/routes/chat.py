from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from app.adapters.rate_limit.base import RateLimitResult
from app.core.rate_limit import enforce_rate_limit
from app.schemas.chat import ChatRequest
from app.services.chat_service import ChatService

router = APIRouter(tags=["Chat"])


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


@router.post(
    "/chat",
    responses={
        400: {"description": "Missing, empty or oversized message."},
        429: {"description": "Per-client hourly quota exhausted."},
        500: {"description": "Upstream model request failed."},
    },
)
async def chat(
    payload: ChatRequest,
    rate_limit: Annotated[RateLimitResult | None, Depends(enforce_rate_limit)],
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> JSONResponse:
    """Forward a visitor message to the persona assistant.

    The upstream provider's response body is relayed as-is. The remaining
    hourly quota for the caller is reported in ``X-RateLimit-Remaining``.

    Args:
        payload: Request body holding the visitor's message.
        rate_limit: Limiter decision (None when rate limiting is disabled).
        service: Chat service bound to the application.

    Returns:
        JSONResponse with the provider payload.
    """
    data = await service.reply(payload.message)

    headers: dict[str, str] = {}
    if rate_limit is not None:
        headers["X-RateLimit-Remaining"] = str(rate_limit.remaining)

    return JSONResponse(content=data, headers=headers)


@router.options("/chat", include_in_schema=False)
async def chat_options() -> Response:
    """Answer bare OPTIONS requests; CORS preflights are handled by middleware."""
    return Response(status_code=200)
