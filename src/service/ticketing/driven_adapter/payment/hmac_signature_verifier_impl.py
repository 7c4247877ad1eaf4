import hashlib
import hmac
from typing import Optional

from pydantic import SecretStr

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_payment_signature_verifier import (
    IPaymentSignatureVerifier,
)


class HmacSignatureVerifier(IPaymentSignatureVerifier):
    """
    Checks `X-Callback-Signature` = hex(HMAC-SHA256(secret, raw body)).

    An empty secret disables verification (local development only).
    """

    def __init__(self, *, secret: SecretStr) -> None:
        self._secret = secret.get_secret_value().encode()

    def verify(self, *, body: bytes, signature: Optional[str]) -> bool:
        if not self._secret:
            Logger.base.warning('⚠️ [CALLBACK] Signature verification disabled (no secret set)')
            return True
        if not signature:
            return False

        expected = hmac.new(self._secret, body, hashlib.sha256).hexdigest()
        return hmac.compare_digest(expected, signature.strip().lower())
