from typing import Optional

from fastapi import APIRouter, Query

from lvcheck.core.config import get_settings
from lvcheck.core.messages import translate_warnings
from lvcheck.risk.leverage_calculator import calculate_metrics
from lvcheck.trading.schemas import CalculationRequest, CalculationResponse

router = APIRouter(prefix="/api", tags=["calculator"])


@router.post("/calculate", response_model=CalculationResponse)
async def calculate(request: CalculationRequest, lang: Optional[str] = Query(None)) -> CalculationResponse:
    """Run the leverage calculator; warnings come back as codes plus localized text."""
    result = calculate_metrics(request.to_inputs())
    messages = translate_warnings(result.warnings, lang or get_settings().default_language)
    return CalculationResponse.from_result(result, messages)
