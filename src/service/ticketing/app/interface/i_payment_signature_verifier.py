from abc import ABC, abstractmethod
from typing import Optional


class IPaymentSignatureVerifier(ABC):
    @abstractmethod
    def verify(self, *, body: bytes, signature: Optional[str]) -> bool:
        """True when the callback body was signed by the payment gateway"""
        pass
