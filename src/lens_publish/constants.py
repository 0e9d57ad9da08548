"""Protocol constants shared across the submission pipeline."""

from enum import Enum

ALLOWED_AUDIO_TYPES = (
    "audio/mpeg",
    "audio/wav",
    "audio/mp4",
    "audio/aac",
    "audio/ogg",
    "audio/webm",
    "audio/flac",
)
ALLOWED_IMAGE_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp")
ALLOWED_VIDEO_TYPES = ("video/mp4", "video/mpeg", "video/ogg", "video/webm", "video/quicktime")

METADATA_VERSION = "2.0.0"
DEFAULT_APP_ID = "Lenster"
DEFAULT_CONTENT_URI_PREFIX = "https://arweave.net/"
DEFAULT_PROFILE_URL_BASE = "https://lenster.xyz/u/"

SIGN_WALLET = "Please sign in your wallet."


class ContentFocus(str, Enum):
    """Main content focus of a publication."""

    AUDIO = "AUDIO"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    TEXT_ONLY = "TEXT_ONLY"


class CollectModules(str, Enum):
    FREE = "FreeCollectModule"
    FEE = "FeeCollectModule"
    LIMITED_FEE = "LimitedFeeCollectModule"
    TIMED_FEE = "TimedFeeCollectModule"
    LIMITED_TIMED_FEE = "LimitedTimedFeeCollectModule"
    REVERT = "RevertCollectModule"


class QueueEntryKind(str, Enum):
    NEW_POST = "NEW_POST"
    NEW_COMMENT = "NEW_COMMENT"
