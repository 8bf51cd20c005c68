"""Token analysis endpoint: validates the address, runs the analyzer."""

from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from loguru import logger
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.util import get_remote_address

from config.settings import settings
from token_risk.analyzer.engine import TokenRiskAnalyzer
from token_risk.utils.address import InvalidAddressError, normalize_address

router = APIRouter(prefix="/api", tags=["analysis"])

limiter = Limiter(key_func=get_remote_address)


class AnalyzeRequest(BaseModel):
    contractAddress: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"


def get_analyzer(request: Request) -> TokenRiskAnalyzer:
    return request.app.state.analyzer


@router.post("/analyze-token")
@limiter.limit(settings.api_rate_limit)
async def analyze_token(request: Request, body: AnalyzeRequest) -> dict[str, Any]:
    """Full risk assessment for one ERC-20 contract address."""
    try:
        address = normalize_address(body.contractAddress)
    except InvalidAddressError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    logger.info(f"[API] analyze-token {address[:10]}")
    result = await get_analyzer(request).analyze(address)
    return result.to_dict()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()
