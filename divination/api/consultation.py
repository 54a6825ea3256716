"""
Template consultation endpoint (no model calls)
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..consultation import ConsultationRequest, ConsultationResponse, analyze_consultation

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["consultation"])


@router.post("/analyze", response_model=ConsultationResponse)
async def analyze(payload: ConsultationRequest):
    """Return a deterministic reading for the chosen style"""
    try:
        return analyze_consultation(payload)
    except ValueError as e:
        logger.info(f"Rejected consultation: {e}")
        return JSONResponse(status_code=400, content={"message": str(e)})
