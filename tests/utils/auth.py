from jose import jwt

from eventhub.core.config import settings
from eventhub.schemas.token import TokenPayload


def get_user_authentication_headers(profile_id: str, email: str = None) -> dict[str, str]:
    """
    Generates a valid JWT token and authentication headers for a test profile.
    """
    payload = TokenPayload(
        sub=profile_id, email=email or f"{profile_id}@example.com", exp=9999999999
    )  # High expiration for tests
    token = jwt.encode(payload.model_dump(), settings.JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def get_cron_headers(secret: str = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {secret or settings.CRON_SECRET}"}
