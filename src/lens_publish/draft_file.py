"""Draft document parsing.

Converts a JSON draft document into a PublicationDraft:

  {
    "text": "gm #lens",
    "attachments": [{"item": "ar://...", "type": "image/png", "altTag": "sunrise"}],
    "audio": {"title": "...", "author": "...", "cover": "...", "coverMimeType": "image/jpeg"},
    "collectModule": {"type": "FreeCollectModule", "payload": {"freeCollectModule": {"followerOnly": false}}},
    "referenceModule": {"followersOnly": false}
  }

Only "text" or "attachments" content is required; every other field is optional.
"""

import json

from .constants import CollectModules
from .errors import InvalidFieldTypeError, InvalidFieldValueError, MissingFieldError, UnknownFieldError
from .models import (
    Attachment,
    AudioMetadata,
    DegreesOfSeparationReference,
    FollowersOnlyReference,
    PublicationDraft,
    ReferenceModuleConfig,
    default_collect_module,
)

ALLOWED_FIELDS = {"text", "attachments", "audio", "collectModule", "referenceModule"}
ATTACHMENT_FIELDS = {"item", "type", "altTag"}
AUDIO_FIELDS = {"title": "title", "author": "author", "cover": "cover", "coverMimeType": "cover_mime_type"}


def parse_draft(content: str) -> PublicationDraft:
    """Parse a JSON draft document.

    Raises:
      - InvalidFieldValueError: Not valid JSON
      - DraftFormatError subclasses: Structural problems (see draft_from_dict)
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidFieldValueError(f"Draft is not valid JSON: {e}") from e
    return draft_from_dict(data)


def draft_from_dict(data: dict) -> PublicationDraft:
    """Convert a draft dictionary into a PublicationDraft.

    CONTRACT:
      Inputs:
        - data: dictionary decoded from a draft document

      Outputs:
        - draft: PublicationDraft

      Invariants:
        - Unknown top-level fields are rejected before any other check
        - attachments keep document order
        - Missing collectModule selects the free collect module
        - Missing referenceModule selects followers-only = false
        - Content emptiness is NOT checked here (validator's concern)

      Raises:
        - InvalidFieldTypeError: Field has wrong type
        - InvalidFieldValueError: Field value violates constraints
        - MissingFieldError: Required nested field is missing
        - UnknownFieldError: Unrecognized field present
    """
    if not isinstance(data, dict):
        raise InvalidFieldTypeError(f"draft must be an object, got {type(data).__name__}")

    unknown = sorted(set(data) - ALLOWED_FIELDS)
    if unknown:
        raise UnknownFieldError(f"Unknown draft fields: {', '.join(unknown)}")

    text = data.get("text", "")
    if not isinstance(text, str):
        raise InvalidFieldTypeError("text must be a string")

    draft = PublicationDraft(text=text)
    draft.attachments = _parse_attachments(data.get("attachments", []))

    if "audio" in data:
        draft.audio = _parse_audio(data["audio"])

    if "collectModule" in data:
        draft.selected_collect_module, draft.collect_module = _parse_collect_module(data["collectModule"])

    if "referenceModule" in data:
        draft.reference_module = _parse_reference_module(data["referenceModule"])

    return draft


def _parse_attachments(value) -> list[Attachment]:
    if not isinstance(value, list):
        raise InvalidFieldTypeError("attachments must be a list")

    attachments = []
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise InvalidFieldTypeError(f"attachments[{index}] must be an object")
        unknown = sorted(set(item) - ATTACHMENT_FIELDS)
        if unknown:
            raise UnknownFieldError(f"Unknown fields in attachments[{index}]: {', '.join(unknown)}")
        for key in ("item", "type"):
            if key not in item:
                raise MissingFieldError(f"attachments[{index}] is missing {key}")
            if not isinstance(item[key], str) or not item[key].strip():
                raise InvalidFieldValueError(f"attachments[{index}].{key} must be a non-empty string")
        if "/" not in item["type"]:
            raise InvalidFieldValueError(f'attachments[{index}].type must be in "type/subtype" format')
        alt = item.get("altTag")
        if alt is not None and not isinstance(alt, str):
            raise InvalidFieldTypeError(f"attachments[{index}].altTag must be a string")
        attachments.append(Attachment(locator=item["item"].strip(), mime_type=item["type"].strip(), alt_text=alt))
    return attachments


def _parse_audio(value) -> AudioMetadata:
    if not isinstance(value, dict):
        raise InvalidFieldTypeError("audio must be an object")
    unknown = sorted(set(value) - set(AUDIO_FIELDS))
    if unknown:
        raise UnknownFieldError(f"Unknown fields in audio: {', '.join(unknown)}")

    fields = {}
    for key, attribute in AUDIO_FIELDS.items():
        item = value.get(key, "")
        if not isinstance(item, str):
            raise InvalidFieldTypeError(f"audio.{key} must be a string")
        fields[attribute] = item
    return AudioMetadata(**fields)


def _parse_collect_module(value) -> tuple[CollectModules, dict]:
    if not isinstance(value, dict):
        raise InvalidFieldTypeError("collectModule must be an object")
    if "type" not in value:
        raise MissingFieldError("collectModule is missing type")

    try:
        selected = CollectModules(value["type"])
    except ValueError:
        choices = ", ".join(module.value for module in CollectModules)
        raise InvalidFieldValueError(f"collectModule.type must be one of: {choices}") from None

    payload = value.get("payload")
    if payload is None:
        payload = default_collect_module() if selected == CollectModules.FREE else {}
    if not isinstance(payload, dict):
        raise InvalidFieldTypeError("collectModule.payload must be an object")
    return selected, payload


def _parse_reference_module(value) -> ReferenceModuleConfig:
    if not isinstance(value, dict):
        raise InvalidFieldTypeError("referenceModule must be an object")

    has_followers = "followersOnly" in value
    has_degrees = "degreesOfSeparation" in value
    if has_followers == has_degrees:
        raise InvalidFieldValueError("referenceModule must have exactly one of followersOnly or degreesOfSeparation")

    if has_followers:
        if not isinstance(value["followersOnly"], bool):
            raise InvalidFieldTypeError("referenceModule.followersOnly must be a boolean")
        return FollowersOnlyReference(followers_only=value["followersOnly"])

    degrees = value["degreesOfSeparation"]
    if isinstance(degrees, bool) or not isinstance(degrees, int):
        raise InvalidFieldTypeError("referenceModule.degreesOfSeparation must be an integer")
    if degrees < 1:
        raise InvalidFieldValueError("referenceModule.degreesOfSeparation must be at least 1")
    return DegreesOfSeparationReference(degrees_of_separation=degrees)
