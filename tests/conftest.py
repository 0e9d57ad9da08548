"""Shared fixtures: in-memory fakes for the relay, signer, chain and content store."""

import pytest

from lens_publish.errors import LensPublishError
from lens_publish.models import RelayerResult, SubmissionRequest, TypedData

SIGNATURE = "0x" + "ab" * 32 + "cd" * 32 + "1b"
DEADLINE = 1700000000


class FakeRelay:
    """Records every call; results and failures are configurable per call type."""

    def __init__(self, dispatcher_result=None, broadcast_result=None, typed_data_error=None, dispatcher_error=None):
        self.dispatcher_result = dispatcher_result or RelayerResult(tx_id="dispatcher-tx")
        self.broadcast_result = broadcast_result or RelayerResult(tx_id="broadcast-tx", tx_hash="0xbroadcast")
        self.typed_data_error = typed_data_error
        self.dispatcher_error = dispatcher_error
        self.calls = []

    async def create_via_dispatcher(self, request: SubmissionRequest, is_comment: bool):
        self.calls.append(("dispatcher", request, is_comment))
        if self.dispatcher_error is not None:
            raise self.dispatcher_error
        return self.dispatcher_result

    async def create_typed_data(self, request: SubmissionRequest, is_comment: bool, nonce: int) -> TypedData:
        self.calls.append(("typed_data", request, is_comment, nonce))
        if self.typed_data_error is not None:
            raise self.typed_data_error
        value = {
            "__typename": "CreateCommentEIP712TypedDataValue" if is_comment else "CreatePostEIP712TypedDataValue",
            "nonce": nonce,
            "deadline": DEADLINE,
            "profileId": request.profile_id,
            "contentURI": request.content_uri,
            "collectModule": "0xcollect",
            "collectModuleInitData": "0x01",
            "referenceModule": "0xreference",
            "referenceModuleInitData": "0x02",
        }
        if is_comment:
            value["profileIdPointed"] = "0x99"
            value["pubIdPointed"] = "0x07"
        return TypedData(
            id=f"typed-{nonce}",
            domain={"__typename": "EIP712TypedDataDomain", "name": "Lens Protocol Profiles", "version": "1"},
            types={"__typename": "CreatePostEIP712TypedDataTypes", "PostWithSig": [{"name": "profileId"}]},
            value=value,
        )

    async def broadcast(self, typed_data_id: str, signature: str):
        self.calls.append(("broadcast", typed_data_id, signature))
        return self.broadcast_result

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeSigner:
    def __init__(self, signature: str = SIGNATURE, error: Exception | None = None):
        self.signature = signature
        self.error = error
        self.payloads = []

    async def sign_typed_data(self, payload: dict) -> str:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.signature


class FakeChain:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.writes = []

    async def write(self, function_name: str, args: dict) -> str:
        self.writes.append((function_name, args))
        if self.error is not None:
            raise self.error
        return f"0xhash{len(self.writes)}"


class FakeStore:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.uploads = []
        self.blobs = []

    async def upload(self, payload: dict) -> str:
        self.uploads.append(payload)
        if self.error is not None:
            raise self.error
        return f"locator-{len(self.uploads)}"

    async def upload_bytes(self, data: bytes, mime_type: str) -> str:
        self.blobs.append((data, mime_type))
        return f"blob-{len(self.blobs)}"


class FakeTextImage:
    def __init__(self):
        self.calls = []

    async def __call__(self, text, handle, now):
        self.calls.append((text, handle, now))
        return "https://arweave.net/text-image", "image/png"


class RecordingReporter:
    def __init__(self):
        self.errors = []

    def __call__(self, error: Exception) -> None:
        self.errors.append(error)


@pytest.fixture
def relay():
    return FakeRelay()


@pytest.fixture
def signer():
    return FakeSigner()


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def text_image():
    return FakeTextImage()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def fakes():
    """Fake classes for tests that need non-default configuration."""

    class Fakes:
        Relay = FakeRelay
        Signer = FakeSigner
        Chain = FakeChain
        Store = FakeStore
        TextImage = FakeTextImage

    return Fakes


class BoomError(LensPublishError):
    """Marker error for collaborator failures in tests."""


@pytest.fixture
def boom():
    return BoomError
