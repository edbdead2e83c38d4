"""SuitePulse — CRM Service."""

from typing import Any, List

from suitepulse.gateway.client import GatewayClient
from suitepulse.models.service_models import (
    ClientRecord,
    CreateClientRequest,
    DealRecord,
    PipelineSummary,
)

WON_STAGE = "Closed Won"
LOST_STAGE = "Closed Lost"


async def list_clients(gateway: GatewayClient) -> List[ClientRecord]:
    result = await gateway.invoke("get-clients")
    rows = (result or {}).get("data", [])
    return [ClientRecord.model_validate(r) for r in rows]


async def create_client(gateway: GatewayClient, request: CreateClientRequest) -> Any:
    return await gateway.invoke("create-client", request.model_dump(exclude_none=True))


async def list_deals(gateway: GatewayClient) -> List[DealRecord]:
    rows = await gateway.query("deals", order="created_at.desc")
    return [DealRecord.model_validate(r) for r in rows]


def pipeline_summary(deals: List[DealRecord]) -> PipelineSummary:
    """Win/loss counts and open pipeline value."""
    if not deals:
        return PipelineSummary()

    won = [d for d in deals if d.stage == WON_STAGE]
    lost = [d for d in deals if d.stage == LOST_STAGE]
    active = [d for d in deals if d.stage not in (WON_STAGE, LOST_STAGE)]

    return PipelineSummary(
        total_deals=len(deals),
        won_deals=len(won),
        lost_deals=len(lost),
        active_deals=len(active),
        conversion_rate=round(len(won) / len(deals) * 100),
        average_deal_value=round(sum(d.value for d in deals) / len(deals), 2),
        pipeline_value=round(sum(d.value for d in active), 2),
        won_value=round(sum(d.value for d in won), 2),
    )
