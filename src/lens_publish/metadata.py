"""Publication metadata construction.

Deterministic metadata generation from a draft snapshot. Derived fields
(content focus, animation URL, cover image) are computed on demand.
"""

import uuid
from collections.abc import Callable
from datetime import datetime

from .constants import (
    ALLOWED_IMAGE_TYPES,
    ALLOWED_VIDEO_TYPES,
    DEFAULT_APP_ID,
    DEFAULT_PROFILE_URL_BASE,
    METADATA_VERSION,
    CollectModules,
    ContentFocus,
)
from .models import MetadataAttribute, PublicationDraft, PublicationMetadata
from .tags import get_tags
from .utils import trimify
from .validator import is_audio_publication


def resolve_main_content_focus(draft: PublicationDraft) -> ContentFocus:
    """Resolve content focus from the first attachment's MIME type.

    Audio wins over image, image over video. No attachments means TEXT_ONLY.
    An attachment of any other type also resolves to TEXT_ONLY.
    """
    if not draft.attachments:
        return ContentFocus.TEXT_ONLY

    mime_type = draft.attachments[0].mime_type
    if is_audio_publication(draft.attachments):
        return ContentFocus.AUDIO
    if mime_type in ALLOWED_IMAGE_TYPES:
        return ContentFocus.IMAGE
    if mime_type in ALLOWED_VIDEO_TYPES:
        return ContentFocus.VIDEO
    return ContentFocus.TEXT_ONLY


def get_animation_url(draft: PublicationDraft) -> str | None:
    """Return the first attachment locator for audio or video, else None."""
    if not draft.attachments:
        return None
    first = draft.attachments[0]
    if is_audio_publication(draft.attachments) or first.mime_type in ALLOWED_VIDEO_TYPES:
        return first.locator
    return None


def needs_text_image(draft: PublicationDraft) -> bool:
    """True when a text-as-image cover must be rendered.

    Skipped when an attachment supplies the cover or when the revert collect
    module makes the preview unused.
    """
    return not draft.attachments and draft.selected_collect_module != CollectModules.REVERT


def build_attributes(draft: PublicationDraft) -> tuple[MetadataAttribute, ...]:
    attributes = [MetadataAttribute(trait_type="type", value=resolve_main_content_focus(draft).value.lower())]
    if is_audio_publication(draft.attachments):
        attributes.append(MetadataAttribute(trait_type="author", value=draft.audio.author))
    return tuple(attributes)


def build_metadata(
    draft: PublicationDraft,
    handle: str,
    now: datetime,
    is_comment: bool = False,
    text_image: tuple[str, str] | None = None,
    locale: str = "en",
    app_id: str = DEFAULT_APP_ID,
    profile_url_base: str = DEFAULT_PROFILE_URL_BASE,
    tag_extractor: Callable[[str], list[str]] = get_tags,
    metadata_id: str | None = None,
) -> PublicationMetadata:
    """Build protocol metadata from a draft.

    CONTRACT:
      Inputs:
        - draft: PublicationDraft (already validated)
        - handle: string, current profile handle
        - now: datetime, creation timestamp
        - is_comment: boolean, selects the default name
        - text_image: optional (locator, mime_type) of a rendered text-as-image cover
        - locale, app_id, profile_url_base: deployment settings
        - tag_extractor: callable deriving tags from content
        - metadata_id: optional fixed id (uuid4 generated when None)

      Outputs:
        - metadata: PublicationMetadata instance

      Invariants:
        - content is trimified draft text
        - animation_url set only for audio or video first attachment
        - attributes always start with {type: <content focus>}
        - author attribute present only for audio publications
        - With attachments, image is the attachment (or audio cover)
        - Without attachments, image is the text-as-image cover or None

      Properties:
        - Deterministic given metadata_id: same inputs yield same metadata
        - Pure: no I/O

      Algorithm:
        1. Resolve content focus and animation URL
        2. Select cover image:
           a. Audio: audio cover and cover mime type
           b. Other attachment: first attachment locator and mime type
           c. No attachment: text_image if provided
        3. Select name: audio title, else "<Post|Comment> by @handle"
        4. Derive tags via tag_extractor(content)
        5. Assemble PublicationMetadata
    """
    content = trimify(draft.text)
    is_audio = is_audio_publication(draft.attachments)

    if draft.attachments:
        if is_audio:
            image, image_mime_type = draft.audio.cover, draft.audio.cover_mime_type
        else:
            image, image_mime_type = draft.attachments[0].locator, draft.attachments[0].mime_type
    elif text_image is not None:
        image, image_mime_type = text_image
    else:
        image, image_mime_type = None, None

    if is_audio:
        name = draft.audio.title
    else:
        name = f"{'Comment' if is_comment else 'Post'} by @{handle}"

    return PublicationMetadata(
        version=METADATA_VERSION,
        metadata_id=metadata_id or str(uuid.uuid4()),
        content=content,
        external_url=f"{profile_url_base}{handle}",
        image=image,
        image_mime_type=image_mime_type,
        name=name,
        tags=tuple(tag_extractor(content)),
        animation_url=get_animation_url(draft),
        main_content_focus=resolve_main_content_focus(draft).value,
        attributes=build_attributes(draft),
        media=tuple(draft.attachments),
        locale=locale,
        created_on=now.isoformat(),
        app_id=app_id,
    )
