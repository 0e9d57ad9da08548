"""Draft validation.

Runs fully before any network call; failures abort the submission.
"""

from .constants import ALLOWED_AUDIO_TYPES
from .errors import EmptyContentError, InvalidAudioMetadataError
from .models import Attachment, AudioMetadata, PublicationDraft

# Field order defines which violation is reported first
AUDIO_SCHEMA = (
    ("title", "Invalid audio title"),
    ("author", "Invalid author name"),
    ("cover", "Invalid cover image"),
)


def is_audio_publication(attachments: list[Attachment]) -> bool:
    """True when the first attachment has an allowed audio MIME type."""
    return bool(attachments) and attachments[0].mime_type in ALLOWED_AUDIO_TYPES


def validate_draft(draft: PublicationDraft, is_comment: bool) -> None:
    """Validate draft content before submission.

    CONTRACT:
      Inputs:
        - draft: PublicationDraft to validate
        - is_comment: boolean, selects the empty-content message

      Outputs:
        - None (raises on invalid draft)

      Invariants:
        - Trimmed text empty AND no attachments raises EmptyContentError
        - Audio publications must satisfy AUDIO_SCHEMA
        - Never performs I/O

      Algorithm:
        1. If draft.text.strip() is empty and draft.attachments is empty:
           a. Raise EmptyContentError("Comment should not be empty!") for comments
           b. Raise EmptyContentError("Post should not be empty!") otherwise
        2. If first attachment is audio:
           a. Call validate_audio_metadata(draft.audio)

      Raises:
        - EmptyContentError: Nothing to publish
        - InvalidAudioMetadataError: First audio schema violation
    """
    if not draft.text.strip() and not draft.attachments:
        kind = "Comment" if is_comment else "Post"
        raise EmptyContentError(f"{kind} should not be empty!")

    if is_audio_publication(draft.attachments):
        validate_audio_metadata(draft.audio)


def validate_audio_metadata(audio: AudioMetadata) -> None:
    """Raise InvalidAudioMetadataError with the first schema violation message."""
    for field_name, message in AUDIO_SCHEMA:
        value = getattr(audio, field_name)
        if not isinstance(value, str) or not value.strip():
            raise InvalidAudioMetadataError(message)
