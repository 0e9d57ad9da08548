"""Typed-data signing and signature nonce tracking.

The nonce counter is optimistic: it advances before each signature request
and never rolls back or reconciles with the on-chain nonce. At most one
submission per user is expected to be in flight.
"""

import logging
import threading
from typing import Any, Protocol

from .errors import SigningError
from .models import SignatureEnvelope, TypedData

logger = logging.getLogger(__name__)

SIGNATURE_HEX_LENGTH = 130


class Signer(Protocol):
    async def sign_typed_data(self, payload: dict) -> str:
        """Sign a domain-separated typed-data payload, returning a 65-byte hex signature."""
        ...


class NonceCounter:
    """Per-session signature nonce override. Strictly increasing."""

    def __init__(self, value: int = 0):
        if value < 0:
            raise ValueError("nonce must be non-negative")
        self._value = value
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        return self._value

    def advance(self) -> int:
        """Increment the counter and return the pre-increment value."""
        with self._lock:
            current = self._value
            self._value = current + 1
            return current

    def compare_and_increment(self, expected: int) -> bool:
        """Increment only if the counter still equals expected."""
        with self._lock:
            if self._value != expected:
                return False
            self._value = expected + 1
            return True


def _omit_typename(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _omit_typename(item) for key, item in value.items() if key != "__typename"}
    if isinstance(value, list):
        return [_omit_typename(item) for item in value]
    return value


def build_signable_payload(typed_data: TypedData) -> dict:
    """Strip transport __typename keys from domain, types and value."""
    return {
        "domain": _omit_typename(typed_data.domain),
        "types": _omit_typename(typed_data.types),
        "value": _omit_typename(typed_data.value),
    }


def split_signature(signature: str) -> tuple[int, str, str]:
    """Split a 65-byte hex signature into (v, r, s).

    CONTRACT:
      Inputs:
        - signature: hex string, optional "0x" prefix, 130 hex characters

      Outputs:
        - (v, r, s): v integer 27 or 28, r and s "0x"-prefixed 32-byte hex strings

      Invariants:
        - r is bytes 0-31, s is bytes 32-63, v is byte 64
        - v given as 0 or 1 is normalized to 27 or 28

      Raises:
        - SigningError: Malformed signature
    """
    body = signature[2:] if signature.startswith(("0x", "0X")) else signature
    if len(body) != SIGNATURE_HEX_LENGTH:
        raise SigningError(f"Signature must be 65 bytes, got {len(body) // 2}")
    try:
        v = int(body[128:130], 16)
        int(body[:128], 16)
    except ValueError:
        raise SigningError("Signature is not valid hex") from None

    if v < 27:
        v += 27
    if v not in (27, 28):
        raise SigningError(f"Invalid signature recovery id: {v}")

    return v, "0x" + body[:64].lower(), "0x" + body[64:128].lower()


class SignatureManager:
    """Signs typed data with the connected wallet and owns the nonce override."""

    def __init__(self, signer: Signer, nonce: NonceCounter):
        self.signer = signer
        self.nonce = nonce

    def reserve_nonce(self) -> int:
        """Advance the counter, returning the nonce to stamp on this attempt."""
        nonce = self.nonce.advance()
        logger.debug("Reserved signature nonce %d", nonce)
        return nonce

    async def sign(self, typed_data: TypedData) -> tuple[SignatureEnvelope, str]:
        """Sign typed data, returning the envelope and the raw signature.

        Raises:
          - SigningError: Wallet rejected or failed, or returned a malformed signature
        """
        payload = build_signable_payload(typed_data)
        try:
            signature = await self.signer.sign_typed_data(payload)
        except SigningError:
            raise
        except Exception as e:
            raise SigningError(f"Wallet failed to sign: {e}") from e

        v, r, s = split_signature(signature)
        deadline = typed_data.value.get("deadline")
        if deadline is None:
            raise SigningError("Typed data is missing a deadline")
        return SignatureEnvelope(v=v, r=r, s=s, deadline=int(deadline)), signature
