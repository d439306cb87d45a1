# eventhub/services/payment/provider_factory.py
import logging
from typing import Optional

from eventhub.core.config import settings
from .provider_interface import PaymentProviderInterface
from .providers.razorpay_provider import RazorpayConfig, RazorpayProvider

logger = logging.getLogger(__name__)

# Global provider instance (singleton pattern)
_provider_instance: Optional[PaymentProviderInterface] = None


def get_payment_provider() -> PaymentProviderInterface:
    """Get the configured payment provider. Usable as a FastAPI dependency."""
    global _provider_instance
    if _provider_instance is None:
        _provider_instance = RazorpayProvider(
            RazorpayConfig(
                key_id=settings.RAZORPAY_KEY_ID,
                key_secret=settings.RAZORPAY_KEY_SECRET,
                webhook_secret=settings.RAZORPAY_WEBHOOK_SECRET,
                base_url=settings.RAZORPAY_API_BASE_URL,
            )
        )
        logger.info("Razorpay payment provider initialized")
    return _provider_instance
