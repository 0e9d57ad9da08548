"""Dispatch strategy selection for submission requests.

State machine:
  START -> DISPATCHER_RELAY -> DONE on success, SIGN_AND_SUBMIT on RelayError
  START -> SIGN_AND_SUBMIT when the profile has no usable dispatcher

SIGN_AND_SUBMIT writes directly to the chain when relaying is disabled.
Otherwise it broadcasts the signature and, on a typed rejection, falls back
to a direct write with the already-built call arguments. Each branch allows
exactly one fallback hop; there is no retry loop.
"""

import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, TypeVar

from .errors import BroadcastError, ChainWriteError, LensPublishError, TransportError, TypedDataError
from .models import RelayError, RelayerResult, RelayResult, SignatureEnvelope, SubmissionRequest, TypedData
from .signature import SignatureManager

logger = logging.getLogger(__name__)

T = TypeVar("T")

POST_WITH_SIG = "postWithSig"
COMMENT_WITH_SIG = "commentWithSig"


class LensRelay(Protocol):
    """Relay and typed-data API. Implementations pick post or comment variants by is_comment."""

    async def create_via_dispatcher(self, request: SubmissionRequest, is_comment: bool) -> RelayResult: ...

    async def create_typed_data(self, request: SubmissionRequest, is_comment: bool, nonce: int) -> TypedData: ...

    async def broadcast(self, typed_data_id: str, signature: str) -> RelayResult: ...


class ChainWriter(Protocol):
    async def write(self, function_name: str, args: dict) -> str:
        """Submit a signed contract call and return the transaction hash."""
        ...


class DispatchState(str, Enum):
    START = "START"
    DISPATCHER_RELAY = "DISPATCHER_RELAY"
    SIGN_AND_SUBMIT = "SIGN_AND_SUBMIT"
    DONE = "DONE"


class DispatchPath(str, Enum):
    """Which collaborator accepted the submission."""

    DISPATCHER = "dispatcher"
    BROADCAST = "broadcast"
    DIRECT = "direct"


@dataclass
class DispatchOutcome:
    path: DispatchPath
    tx_hash: str | None = None
    tx_id: str | None = None
    states: list[DispatchState] = field(default_factory=list)


def build_call_arguments(typed_data: TypedData, envelope: SignatureEnvelope, is_comment: bool) -> dict:
    """Build the postWithSig/commentWithSig argument struct from signed typed data.

    Comments additionally carry profileIdPointed and pubIdPointed.
    """
    value = typed_data.value
    args = {
        "profileId": value["profileId"],
        "contentURI": value["contentURI"],
        "collectModule": value["collectModule"],
        "collectModuleInitData": value["collectModuleInitData"],
        "referenceModule": value["referenceModule"],
        "referenceModuleInitData": value["referenceModuleInitData"],
    }
    if is_comment:
        args["profileIdPointed"] = value["profileIdPointed"]
        args["pubIdPointed"] = value["pubIdPointed"]
    args["sig"] = envelope.to_dict()
    return args


async def _guarded(call: Awaitable[T], error_cls: type[TransportError], action: str) -> T:
    """Await a collaborator call, wrapping foreign exceptions in error_cls."""
    try:
        return await call
    except LensPublishError:
        raise
    except Exception as e:
        raise error_cls(f"{action} failed: {e}") from e


class DispatchStrategySelector:
    """Chooses and drives the submission path for one normalized request.

    relay_on None means not configured: relaying is on, and a composer fills
    it from its Settings.
    """

    def __init__(
        self, relay: LensRelay, chain: ChainWriter, signatures: SignatureManager, relay_on: bool | None = None
    ):
        self.relay = relay
        self.chain = chain
        self.signatures = signatures
        self.relay_on = relay_on

    async def dispatch(
        self, request: SubmissionRequest, is_comment: bool, can_use_dispatcher: bool
    ) -> DispatchOutcome:
        """Submit request via the dispatcher when usable, else via signature.

        Raises:
          - TransportError: Collaborator failure with no remaining fallback
          - SigningError: Wallet rejected the signature (no fallback)
        """
        states = [DispatchState.START]

        if can_use_dispatcher:
            states.append(DispatchState.DISPATCHER_RELAY)
            logger.debug("Dispatching %s via dispatcher relay", "comment" if is_comment else "post")
            result = await _guarded(
                self.relay.create_via_dispatcher(request, is_comment), TransportError, "Dispatcher relay"
            )
            if isinstance(result, RelayerResult):
                states.append(DispatchState.DONE)
                return DispatchOutcome(
                    DispatchPath.DISPATCHER, tx_hash=result.tx_hash, tx_id=result.tx_id, states=states
                )
            if not isinstance(result, RelayError):
                raise TransportError(f"Unexpected dispatcher result: {type(result).__name__}")
            logger.warning("Dispatcher relay rejected submission (%s); falling back to signature", result.reason)

        states.append(DispatchState.SIGN_AND_SUBMIT)
        outcome = await self._sign_and_submit(request, is_comment)
        outcome.states = states + [DispatchState.DONE]
        return outcome

    async def _sign_and_submit(self, request: SubmissionRequest, is_comment: bool) -> DispatchOutcome:
        nonce = self.signatures.reserve_nonce()
        typed_data = await _guarded(
            self.relay.create_typed_data(request, is_comment, nonce), TypedDataError, "Typed data generation"
        )
        envelope, signature = await self.signatures.sign(typed_data)
        args = build_call_arguments(typed_data, envelope, is_comment)
        function_name = COMMENT_WITH_SIG if is_comment else POST_WITH_SIG

        if self.relay_on is False:
            return await self._write(function_name, args)

        result = await _guarded(self.relay.broadcast(typed_data.id, signature), BroadcastError, "Broadcast")
        if isinstance(result, RelayError):
            logger.warning("Broadcast relay rejected submission: %s; writing directly", result.reason)
            return await self._write(function_name, args)
        if not isinstance(result, RelayerResult):
            raise BroadcastError(f"Unexpected broadcast result: {type(result).__name__}")
        return DispatchOutcome(DispatchPath.BROADCAST, tx_hash=result.tx_hash, tx_id=result.tx_id)

    async def _write(self, function_name: str, args: dict) -> DispatchOutcome:
        tx_hash = await _guarded(self.chain.write(function_name, args), ChainWriteError, function_name)
        return DispatchOutcome(DispatchPath.DIRECT, tx_hash=tx_hash)
