from fastapi import Request

from challenge_generator.services.challenge_service import ChallengeGenerator


def get_challenge_generator(request: Request) -> ChallengeGenerator:
    """Dependency returning the generator built during application startup."""
    return request.app.state.challenge_generator
