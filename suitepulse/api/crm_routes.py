"""SuitePulse — CRM Routes."""

from fastapi import APIRouter, Depends

from suitepulse.api.dependencies import get_gateway
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.service_models import CreateClientRequest
from suitepulse.services import crm

router = APIRouter(prefix="/crm", tags=["CRM"])


@router.get("/clients")
async def get_clients(gateway: GatewayClient = Depends(get_gateway)):
    return {"clients": await crm.list_clients(gateway)}


@router.post("/clients")
async def post_client(
    request: CreateClientRequest,
    gateway: GatewayClient = Depends(get_gateway),
):
    return await crm.create_client(gateway, request)


@router.get("/pipeline")
async def get_pipeline(gateway: GatewayClient = Depends(get_gateway)):
    """Win/loss counts and open value over every deal the caller can see."""
    return crm.pipeline_summary(await crm.list_deals(gateway))
