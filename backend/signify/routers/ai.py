"""
Signify - AI Assistant API Router

Simulated AWS Bedrock (text generation) and AWS Comprehend (text analysis).
"""
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..services.ai import BedrockService, ComprehendService
from ..services.ai.bedrock_service import DEFAULT_MAX_TOKENS, DEFAULT_MODEL_ID


router = APIRouter(prefix="/api", tags=["ai"])


@lru_cache()
def get_bedrock_service() -> BedrockService:
    return BedrockService()


@lru_cache()
def get_comprehend_service() -> ComprehendService:
    return ComprehendService()


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class BedrockRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    prompt: str = ""
    model_id: str = DEFAULT_MODEL_ID
    max_tokens: int = Field(DEFAULT_MAX_TOKENS, gt=0)


class ComprehendRequest(BaseModel):
    text: str = ""
    language_code: str = "en"


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.post("/bedrock/invoke")
async def invoke_bedrock(
    request: BedrockRequest,
    service: BedrockService = Depends(get_bedrock_service),
):
    if not request.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")
    result = service.invoke(request.prompt, request.model_id, request.max_tokens)
    return result.to_dict()


@router.get("/bedrock/status")
async def bedrock_status(service: BedrockService = Depends(get_bedrock_service)):
    return service.status()


@router.post("/comprehend/analyze")
async def analyze_text(
    request: ComprehendRequest,
    service: ComprehendService = Depends(get_comprehend_service),
):
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    return service.analyze(request.text, request.language_code).to_dict()


@router.get("/comprehend/status")
async def comprehend_status(service: ComprehendService = Depends(get_comprehend_service)):
    return service.status()
