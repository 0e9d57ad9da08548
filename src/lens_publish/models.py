"""Data models for lens-publish.

Draft, metadata, request, relay result and queue entry structures.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from .constants import CollectModules, QueueEntryKind


@dataclass(frozen=True)
class Attachment:
    """Uploaded attachment. Insertion order is display order."""

    locator: str
    mime_type: str
    alt_text: str | None = None

    def to_dict(self) -> dict:
        return {"item": self.locator, "type": self.mime_type, "altTag": self.alt_text}


@dataclass
class AudioMetadata:
    """Audio publication details, required when the first attachment is audio."""

    title: str = ""
    author: str = ""
    cover: str = ""
    cover_mime_type: str = ""


@dataclass(frozen=True)
class FollowersOnlyReference:
    followers_only: bool = False


@dataclass(frozen=True)
class DegreesOfSeparationReference:
    degrees_of_separation: int = 2


ReferenceModuleConfig = Union[FollowersOnlyReference, DegreesOfSeparationReference]


def default_collect_module() -> dict:
    return {"freeCollectModule": {"followerOnly": False}}


@dataclass
class PublicationDraft:
    """Mutable draft owned by a composer session."""

    text: str = ""
    attachments: list[Attachment] = field(default_factory=list)
    audio: AudioMetadata = field(default_factory=AudioMetadata)
    selected_collect_module: CollectModules = CollectModules.FREE
    collect_module: dict = field(default_factory=default_collect_module)
    reference_module: ReferenceModuleConfig = field(default_factory=FollowersOnlyReference)

    def reset(self) -> None:
        """Clear content and collect settings after an accepted submission.

        Reference module choice is a user preference and survives the reset.
        """
        self.text = ""
        self.attachments = []
        self.audio = AudioMetadata()
        self.selected_collect_module = CollectModules.FREE
        self.collect_module = default_collect_module()


@dataclass(frozen=True)
class Profile:
    """Currently authenticated profile."""

    id: str
    handle: str
    can_use_relay: bool = False


@dataclass(frozen=True)
class ParentPublication:
    """Publication being commented on.

    For mirrors, mirror_of_id holds the id of the re-shared original.
    """

    id: str
    typename: str = "Post"
    mirror_of_id: str | None = None

    @property
    def is_mirror(self) -> bool:
        return self.typename == "Mirror"


@dataclass(frozen=True)
class MetadataAttribute:
    trait_type: str
    value: str
    display_type: str = "string"

    def to_dict(self) -> dict:
        return {"traitType": self.trait_type, "displayType": self.display_type, "value": self.value}


@dataclass(frozen=True)
class PublicationMetadata:
    """Protocol metadata object persisted to content storage."""

    version: str
    metadata_id: str
    content: str
    external_url: str
    image: str | None
    image_mime_type: str | None
    name: str
    tags: tuple[str, ...]
    animation_url: str | None
    main_content_focus: str
    attributes: tuple[MetadataAttribute, ...]
    media: tuple[Attachment, ...]
    locale: str
    created_on: str
    app_id: str
    content_warning: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization.

        Content is duplicated into description for protocol compatibility.
        """
        return {
            "version": self.version,
            "metadata_id": self.metadata_id,
            "description": self.content,
            "content": self.content,
            "external_url": self.external_url,
            "image": self.image,
            "imageMimeType": self.image_mime_type,
            "name": self.name,
            "tags": list(self.tags),
            "animation_url": self.animation_url,
            "mainContentFocus": self.main_content_focus,
            "contentWarning": self.content_warning,
            "attributes": [attribute.to_dict() for attribute in self.attributes],
            "media": [attachment.to_dict() for attachment in self.media],
            "locale": self.locale,
            "createdOn": self.created_on,
            "appId": self.app_id,
        }


@dataclass(frozen=True)
class SubmissionRequest:
    """Normalized create-publication request. Never mutated after hand-off."""

    profile_id: str
    content_uri: str
    collect_module: dict
    reference_module: dict
    publication_id: str | None = None

    def to_dict(self) -> dict:
        request = {"profileId": self.profile_id, "contentURI": self.content_uri}
        if self.publication_id is not None:
            request["publicationId"] = self.publication_id
        request["collectModule"] = self.collect_module
        request["referenceModule"] = self.reference_module
        return request


@dataclass(frozen=True)
class TypedData:
    """Typed-data descriptor returned by the typed-data generation API."""

    id: str
    domain: dict[str, Any]
    types: dict[str, Any]
    value: dict[str, Any]


@dataclass(frozen=True)
class SignatureEnvelope:
    v: int
    r: str
    s: str
    deadline: int

    def to_dict(self) -> dict:
        return {"v": self.v, "r": self.r, "s": self.s, "deadline": self.deadline}


@dataclass(frozen=True)
class RelayerResult:
    """Accepted relay result."""

    tx_id: str
    tx_hash: str | None = None


@dataclass(frozen=True)
class RelayError:
    """Typed relay rejection."""

    reason: str | None = None


RelayResult = Union[RelayerResult, RelayError]


@dataclass(frozen=True)
class TransactionQueueEntry:
    """Optimistic placeholder for a submission awaiting confirmation."""

    id: str
    kind: QueueEntryKind
    content: str
    attachments: tuple[Attachment, ...] = ()
    parent_id: str | None = None
    tx_hash: str | None = None
    tx_id: str | None = None
    audio_title: str | None = None
    audio_cover: str | None = None
    audio_author: str | None = None

    def to_dict(self) -> dict:
        entry = {"id": self.id, "type": self.kind.value}
        if self.parent_id is not None:
            entry["parent"] = self.parent_id
        entry.update(
            {
                "txHash": self.tx_hash,
                "txId": self.tx_id,
                "content": self.content,
                "attachments": [attachment.to_dict() for attachment in self.attachments],
                "title": self.audio_title,
                "cover": self.audio_cover,
                "author": self.audio_author,
            }
        )
        return entry
