import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from challenge_generator.config import settings
from challenge_generator.dependencies import get_challenge_generator
from challenge_generator.exceptions import ChallengeGenerationError
from challenge_generator.middleware.rate_limit import limiter
from challenge_generator.schemas.challenge import (
    CodeChallengeItem,
    GenerateChallengeRequest,
    GenerateChallengeResponse,
)
from challenge_generator.services.challenge_service import ChallengeGenerator
from challenge_generator.services.defaults_service import slugify
from challenge_generator.services.export_service import render_markdown

router = APIRouter()
logger = structlog.get_logger()


@router.post("/generate-challenge", response_model=GenerateChallengeResponse)
@limiter.limit(settings.rate_limit_generate)
async def generate_challenge(
    request: Request,
    challenge_request: GenerateChallengeRequest,
    generator: ChallengeGenerator = Depends(get_challenge_generator),
):
    """
    Generate a programming challenge from a natural-language request.

    One model call per request. Failures come back as
    ``{success: false, error}`` with status 500; the client decides whether
    to resubmit.
    """
    logger.info(
        "generate_challenge_requested",
        language=challenge_request.language.value,
        level=challenge_request.level.value,
        tag_count=len(challenge_request.tags or []),
    )

    try:
        challenge = await generator.generate(challenge_request)
    except ChallengeGenerationError as e:
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return JSONResponse(content={"success": True, "challenge": challenge})


@router.post("/export/markdown")
async def export_markdown(challenge: CodeChallengeItem):
    """Render a generated challenge as a downloadable Markdown file."""
    logger.info("challenge_exported", challenge_id=challenge.id, export_format="markdown")
    return Response(
        content=render_markdown(challenge),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{slugify(challenge.id)}.md"'},
    )
