from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger
from ..services import get_orchestrator
from ..interview_service import InterviewOrchestrator
from ..models import ChatRequest, ModelCatalogResponse, ResetRequest, ResetResponse, parse_body

router = APIRouter(prefix="/interview", tags=["Interview"])


async def _read_json(request: Request):
    # An unreadable body counts as an empty one
    try:
        return await request.json()
    except ValueError:
        logger.warning(f"Invalid JSON body on {request.url.path}, using empty object")
        return {}


@router.post("/chat", summary="Mock Interview Turn")
async def chat(
    request: Request,
    model: Optional[str] = Query(None, description="Groq model id, overrides INTERVIEW_MODEL"),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
):
    body = parse_body(ChatRequest, await _read_json(request))
    result = await orchestrator.chat(body, query_model=model)
    return JSONResponse(
        status_code=500 if result.error else 200,
        content=result.model_dump(mode="json", exclude_none=True),
    )


@router.get("/models", response_model=ModelCatalogResponse, summary="Available Interview Models")
async def list_models(orchestrator: InterviewOrchestrator = Depends(get_orchestrator)):
    return orchestrator.list_models()


@router.post("/reset", response_model=ResetResponse, summary="Reset Interview Session")
async def reset(request: Request, orchestrator: InterviewOrchestrator = Depends(get_orchestrator)):
    body = parse_body(ResetRequest, await _read_json(request))
    return await orchestrator.reset_session(body.sessionId)
