import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from challenge_generator.dependencies import get_challenge_generator
from challenge_generator.exceptions import ChallengeGenerationError
from challenge_generator.schemas.challenge import ModelsResponse, ModelStatusResponse
from challenge_generator.services.challenge_service import ChallengeGenerator

router = APIRouter()
logger = structlog.get_logger()


@router.get("/models", response_model=ModelsResponse)
async def list_models(generator: ChallengeGenerator = Depends(get_challenge_generator)):
    """List the models pulled into the local Ollama service."""
    try:
        models = await generator.list_models()
    except ChallengeGenerationError as e:
        logger.warning("list_models_failed", error=str(e))
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to fetch models. Make sure Ollama is running.",
            },
        )

    return ModelsResponse(success=True, models=models)


@router.get("/models/status", response_model=ModelStatusResponse)
async def model_status(generator: ChallengeGenerator = Depends(get_challenge_generator)):
    """Report whether Ollama is reachable and the configured model is installed."""
    return ModelStatusResponse(**await generator.check_model_health())
