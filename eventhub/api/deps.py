# eventhub/api/deps.py
import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader, OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.core.actor import Actor
from eventhub.core.config import settings
from eventhub.db.session import get_db
from eventhub.schemas.token import TokenPayload
from eventhub.services.payment.provider_factory import get_payment_provider
from eventhub.services.payment.provider_interface import PaymentProviderInterface
from eventhub.services.payment.reconciliation import PaymentReconciliationService

logger = logging.getLogger(__name__)

# The `tokenUrl` doesn't have to be a real endpoint in this service,
# sessions are issued by the identity provider.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


def get_current_user(token: str = Depends(oauth2_scheme)) -> TokenPayload:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
        token_data = TokenPayload(**payload)
    except (JWTError, ValueError):
        # Catches any error from jose or Pydantic validation
        raise credentials_exception

    return token_data


def get_current_actor(
    db: Session = Depends(get_db),
    token_data: TokenPayload = Depends(get_current_user),
) -> Actor:
    """Resolve the caller's profile and capabilities once per request."""
    profile = crud.profile.get(db, id=token_data.sub)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Actor(
        profile_id=profile.id,
        email=profile.email,
        is_admin=bool(profile.is_admin),
    )


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden - Admin access required",
        )
    return actor


# External schedulers send the shared secret as a bearer credential.
cron_auth_header = APIKeyHeader(name="Authorization", auto_error=False)


def verify_cron_secret(authorization: Optional[str] = Security(cron_auth_header)) -> None:
    expected = f"Bearer {settings.CRON_SECRET}"
    if not authorization or not secrets.compare_digest(
        authorization.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Rejected cron call with missing or invalid credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )


async def get_raw_body(request: Request) -> bytes:
    """The exact bytes that were signed; never re-serialize before verifying."""
    return await request.body()


def get_client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def get_payment_service(
    db: Session = Depends(get_db),
    provider: PaymentProviderInterface = Depends(get_payment_provider),
) -> PaymentReconciliationService:
    return PaymentReconciliationService(db, provider)
