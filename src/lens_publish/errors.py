"""Exception hierarchy for lens-publish.

Validation errors abort a submission before any network effect. Transport and
signing errors are reported and surfaced as SubmissionFailedError by the composer.
"""


class LensPublishError(Exception):
    """Base class for all lens-publish errors."""


class ConfigError(LensPublishError):
    """Invalid configuration value."""


class ValidationError(LensPublishError):
    """Draft rejected before any network call."""


class EmptyContentError(ValidationError):
    """Draft has no text and no attachments."""


class InvalidAudioMetadataError(ValidationError):
    """Audio metadata does not satisfy its schema."""


class DraftFormatError(ValidationError):
    """Draft document is malformed."""


class MissingFieldError(DraftFormatError):
    """Required draft field is missing."""


class InvalidFieldTypeError(DraftFormatError):
    """Draft field has the wrong type."""


class InvalidFieldValueError(DraftFormatError):
    """Draft field value violates constraints."""


class UnknownFieldError(DraftFormatError):
    """Draft contains a field that is not recognized."""


class NoProfileError(LensPublishError):
    """No authenticated profile is available."""


class SubmissionInProgressError(LensPublishError):
    """Another submission is still in flight."""


class TransportError(LensPublishError):
    """Network, storage or chain collaborator failure."""


class MetadataUploadError(TransportError):
    """Metadata could not be persisted to content storage."""


class TextImageError(TransportError):
    """Text-as-image rendering failed."""


class TypedDataError(TransportError):
    """Typed-data generation failed."""


class BroadcastError(TransportError):
    """Broadcast relay transport failure."""


class ChainWriteError(TransportError):
    """Direct signed chain call failed."""


class SigningError(LensPublishError):
    """Wallet rejected or failed to sign the typed data."""


class SubmissionFailedError(LensPublishError):
    """Submission failed after validation passed.

    The underlying transport or signing error is available as ``cause``.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause
