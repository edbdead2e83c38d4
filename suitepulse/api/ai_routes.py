"""SuitePulse — AI Briefing Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from suitepulse.ai.base_provider import AIProvider
from suitepulse.ai.claude_provider import ClaudeProvider
from suitepulse.api.dependencies import get_gateway, get_request_context
from suitepulse.core.context import RequestContext
from suitepulse.core.logging import get_logger
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.metrics_models import MetricsSnapshot
from suitepulse.reconciler.reconciler import get_unified_metrics

logger = get_logger("api.ai")

router = APIRouter(tags=["AI"])


class SummaryRequest(BaseModel):
    """Request body for POST /metrics/summary."""

    question: Optional[str] = None


class SummaryResponse(BaseModel):
    """Response for POST /metrics/summary."""

    status: str
    summary: str
    snapshot: MetricsSnapshot


def get_provider() -> AIProvider:
    """Dependency — the configured AI provider."""
    provider = ClaudeProvider()
    if not provider.is_available():
        raise HTTPException(
            status_code=503,
            detail="No AI provider configured. Set ANTHROPIC_API_KEY in .env.",
        )
    return provider


@router.post("/metrics/summary", response_model=SummaryResponse)
async def generate_summary(
    request: SummaryRequest,
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
    provider: AIProvider = Depends(get_provider),
):
    """Narrate a fresh snapshot, or answer a question about it."""
    snapshot = await get_unified_metrics(ctx, gateway)
    try:
        summary = await provider.generate_summary(
            snapshot.model_dump(mode="json"), question=request.question
        )
    except Exception as e:
        logger.error(f"AI generation failed: {e}", extra={"endpoint": "/metrics/summary"})
        raise HTTPException(status_code=500, detail=f"AI generation failed: {str(e)}")
    return SummaryResponse(status="success", summary=summary, snapshot=snapshot)
