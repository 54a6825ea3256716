"""
Divination API endpoints backed by the multi-agent pipeline
"""

import asyncio
import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from .models import DivinationRequest, DivinationResponse, ErrorResponse, StepRecord
from ..agent.errors import AgentInvocationError
from ..agent.factory import GenerationClientFactory
from ..agent.orchestrator import DivinationOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["analysis"])


def build_question(request: DivinationRequest) -> str:
    """Fold optional context into the question handed to the pipeline"""
    if request.context:
        return f"{request.question}\n\nContext: {request.context}"
    return request.question


def get_orchestrator(request: Request) -> DivinationOrchestrator:
    """
    Build an orchestrator for the running app.

    The generation client is created from config on first use and then
    shared by all requests; runs themselves share no state. When the primary
    model cannot be built (e.g. its API key is missing) the fallback model
    is used instead.
    """
    state = request.app.state
    if state.generation_client is None:
        try:
            client = GenerationClientFactory.create_primary(state.config)
        except ValueError as e:
            logger.warning(f"Primary model unavailable ({e}); using fallback model")
            client = GenerationClientFactory.create_fallback(state.config)
        state.generation_client = client
        state.owns_generation_client = True

    return DivinationOrchestrator(
        state.generation_client,
        max_review_iterations=state.config.orchestrator.max_review_iterations,
    )


@router.post(
    "/analysis",
    response_model=DivinationResponse,
    responses={
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def run_divination(payload: DivinationRequest, request: Request):
    """
    Run the question through the divination agents and return the answer
    together with every agent step
    """
    config = request.app.state.config
    start_time = time.time()

    try:
        orchestrator = get_orchestrator(request)
        result = await asyncio.wait_for(
            orchestrator.run(build_question(payload)),
            timeout=config.server.request_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning(
            f"Divination timed out after {config.server.request_timeout_seconds}s"
        )
        return JSONResponse(status_code=504, content={"error": "Request timed out"})
    except AgentInvocationError as e:
        logger.error(f"Upstream generation failed for agent {e.agent_name}: {e.cause}")
        return JSONResponse(
            status_code=502,
            content={"error": e.message, "agent": e.agent_name},
        )
    except Exception as e:
        logger.error(f"Error running divination: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Unexpected error", "details": str(e)},
        )

    processing_time = time.time() - start_time
    logger.info(
        f"Divination finished in {processing_time:.2f}s "
        f"(qa_satisfied={result.qa_satisfied}, steps={len(result.steps)})"
    )

    return DivinationResponse(
        final_answer=result.final_answer,
        qa_satisfied=result.qa_satisfied,
        steps=[StepRecord.from_step(step) for step in result.steps],
        processing_time=processing_time,
    )
