"""Challenge generation pipeline.

prompt -> one Ollama chat call -> extract JSON -> apply defaults -> validate
(lenient) -> at most one auto-fix pass -> re-validate. The model is called
exactly once per generation; retrying is the caller's decision.
"""

from enum import Enum
from typing import Any

from jsonschema import Draft7Validator

from challenge_generator.config import Settings
from challenge_generator.exceptions import (
    ChallengeGenerationError,
    EmptyResponseError,
    SchemaInvalidAfterRepair,
)
from challenge_generator.logging_config import get_logger
from challenge_generator.schemas.challenge import GenerateChallengeRequest
from challenge_generator.services.defaults_service import (
    apply_defaults,
    auto_fix_common_issues,
)
from challenge_generator.services.extraction_service import extract_challenge_json
from challenge_generator.services.ollama_service import OllamaClient
from challenge_generator.services.prompt_service import (
    build_system_message,
    build_user_prompt,
    load_system_prompt,
)
from challenge_generator.services.validation_service import (
    load_schema_validator,
    validate_challenge,
)

logger = get_logger(__name__)

CONTENT_FIELDS = ("title", "statement", "examples", "test_cases")


class GenerationStage(str, Enum):
    IDLE = "idle"
    PROMPT_BUILT = "prompt_built"
    MODEL_INVOKED = "model_invoked"
    EXTRACTED = "extracted"
    DEFAULTED = "defaulted"
    VALIDATED = "validated"
    REPAIRING = "repairing"
    REVALIDATED = "revalidated"
    DONE = "done"
    FAILED = "failed"


class ChallengeGenerator:
    """Process-wide generation service, built once in the app lifespan."""

    def __init__(
        self,
        client: OllamaClient,
        validator: Draft7Validator,
        system_prompt: str,
        settings: Settings,
    ):
        self.client = client
        self.validator = validator
        self.system_prompt = system_prompt
        self.settings = settings

    @property
    def model(self) -> str:
        return self.client.model

    def _sampling_options(self) -> dict[str, Any]:
        return {
            "temperature": self.settings.llm_temperature,
            "top_p": self.settings.llm_top_p,
            "num_predict": self.settings.llm_num_predict,
        }

    async def generate(self, request: GenerateChallengeRequest) -> dict[str, Any]:
        """
        Generate one challenge.

        Raises a ChallengeGenerationError subclass on any failure; the
        message is safe to show to the caller.
        """
        language = request.language.value
        level = request.level.value
        stage = GenerationStage.IDLE
        log = logger.bind(model=self.model, language=language, level=level)

        try:
            user_prompt = build_user_prompt(request.prompt, language, level, request.tags)
            stage = GenerationStage.PROMPT_BUILT
            log.info(
                "challenge_generation_started",
                stage=stage.value,
                prompt_preview=request.prompt[:50],
            )

            raw_content = await self.client.chat(
                messages=[
                    {"role": "system", "content": build_system_message(self.system_prompt)},
                    {"role": "user", "content": user_prompt},
                ],
                options=self._sampling_options(),
                response_format="json",
            )
            stage = GenerationStage.MODEL_INVOKED
            log.info(
                "model_response_received",
                stage=stage.value,
                response_length=len(raw_content),
                head_preview=raw_content[: self.settings.preview_head_chars],
            )

            if len(raw_content.strip()) < self.settings.min_response_length:
                raise EmptyResponseError(len(raw_content))

            partial = extract_challenge_json(raw_content)
            stage = GenerationStage.EXTRACTED
            log.info("challenge_extracted", stage=stage.value, fields=sorted(partial))
            if not any(partial.get(name) for name in CONTENT_FIELDS):
                log.warning("challenge_content_missing", stage=stage.value, fields=sorted(partial))

            challenge = apply_defaults(partial, language=language, level=level, tags=request.tags)
            stage = GenerationStage.DEFAULTED

            validation = validate_challenge(self.validator, challenge, "lenient")
            stage = GenerationStage.VALIDATED
            if validation.warnings:
                log.warning(
                    "challenge_validation_warnings",
                    stage=stage.value,
                    warnings=validation.warnings,
                )

            if not validation.valid:
                stage = GenerationStage.REPAIRING
                log.warning(
                    "challenge_validation_failed", stage=stage.value, errors=validation.errors
                )
                challenge = auto_fix_common_issues(challenge, validation.errors)

                revalidation = validate_challenge(self.validator, challenge, "lenient")
                stage = GenerationStage.REVALIDATED
                if not revalidation.valid:
                    log.error(
                        "challenge_invalid_after_repair",
                        stage=stage.value,
                        errors=revalidation.errors,
                    )
                    raise SchemaInvalidAfterRepair(revalidation.errors)

        except ChallengeGenerationError as e:
            log.error(
                "challenge_generation_failed",
                stage=GenerationStage.FAILED.value,
                failed_after=stage.value,
                error_type=type(e).__name__,
            )
            raise

        log.info(
            "challenge_generated", stage=GenerationStage.DONE.value, challenge_id=challenge["id"]
        )
        return challenge

    async def list_models(self) -> list[str]:
        return await self.client.list_models()

    async def check_model_health(self) -> dict[str, Any]:
        """Is Ollama reachable, and is the configured model pulled?"""
        try:
            models = await self.client.list_models()
        except ChallengeGenerationError as e:
            return {
                "available": False,
                "model": self.model,
                "model_installed": False,
                "error": str(e),
            }
        return {
            "available": True,
            "model": self.model,
            "model_installed": self.model in models,
        }


def build_challenge_generator(settings: Settings) -> ChallengeGenerator:
    """
    Load the startup assets and create the shared generator.

    A missing or invalid schema raises SchemaLoadError and must stop the
    process; a missing system prompt only degrades to the built-in one.
    """
    validator = load_schema_validator(settings.schema_path)
    system_prompt = load_system_prompt(settings.system_prompt_path)
    client = OllamaClient(
        base_url=settings.ollama_base_url,
        model=settings.ollama_model,
        timeout_seconds=settings.ollama_timeout_seconds,
    )
    logger.info(
        "challenge_generator_ready",
        ollama_base_url=settings.ollama_base_url,
        model=settings.ollama_model,
    )
    return ChallengeGenerator(client, validator, system_prompt, settings)
