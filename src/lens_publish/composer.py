"""Publication submission orchestration.

Validation -> metadata -> upload -> request -> dispatch -> optimistic queue -> reset.
"""

import copy
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from .config import Settings
from .constants import SIGN_WALLET, QueueEntryKind
from .dispatch import DispatchOutcome, DispatchStrategySelector
from .errors import (
    LensPublishError,
    MetadataUploadError,
    NoProfileError,
    SubmissionFailedError,
    SubmissionInProgressError,
    ValidationError,
)
from .metadata import build_metadata, needs_text_image
from .models import (
    AudioMetadata,
    ParentPublication,
    Profile,
    PublicationDraft,
    PublicationMetadata,
    SubmissionRequest,
    TransactionQueueEntry,
)
from .request_builder import build_submission_request, resolve_publication_id
from .storage import ContentStore
from .tags import get_tags
from .txqueue import TransactionQueue
from .validator import is_audio_publication, validate_draft

logger = logging.getLogger(__name__)

TextImageFn = Callable[[str, str, datetime], Awaitable[tuple[str, str]]]
CompletionListener = Callable[[TransactionQueueEntry], None]


def report_error(error: Exception) -> None:
    """Default error reporter: log the failure with its traceback."""
    logger.error("Publication submission failed: %s", error, exc_info=error)


@dataclass(frozen=True)
class SubmissionResult:
    entry: TransactionQueueEntry
    outcome: DispatchOutcome
    locator: str
    metadata: PublicationMetadata
    request: SubmissionRequest


@dataclass(frozen=True)
class PreparedSubmission:
    """Metadata stored and request built, ready for dispatch."""

    metadata: PublicationMetadata
    locator: str
    request: SubmissionRequest


async def prepare_submission(
    draft: PublicationDraft,
    profile: Profile,
    store: ContentStore,
    now: datetime,
    settings: Settings | None = None,
    parent: ParentPublication | None = None,
    text_image: TextImageFn | None = None,
    tag_extractor: Callable[[str], list[str]] = get_tags,
) -> PreparedSubmission:
    """Build and store metadata, then build the submission request.

    CONTRACT:
      Inputs:
        - draft: PublicationDraft snapshot (already validated)
        - profile: Profile of the author
        - store: ContentStore receiving the metadata object
        - now: datetime, creation timestamp
        - settings: Settings (defaults when None)
        - parent: ParentPublication when commenting
        - text_image: optional async renderer returning (image_url, mime_type)
        - tag_extractor: callable deriving tags from content

      Outputs:
        - prepared: PreparedSubmission

      Invariants:
        - text_image is awaited only when needs_text_image(draft)
        - store.upload is called exactly once
        - Upload failure propagates, never retried

      Raises:
        - MetadataUploadError: Storage failure
        - TextImageError: Rendering failure
    """
    settings = settings or Settings()

    rendered = None
    if text_image is not None and needs_text_image(draft):
        rendered = await text_image(draft.text, profile.handle, now)

    metadata = build_metadata(
        draft,
        profile.handle,
        now,
        is_comment=parent is not None,
        text_image=rendered,
        locale=settings.locale,
        app_id=settings.app_id,
        profile_url_base=settings.profile_url_base,
        tag_extractor=tag_extractor,
    )

    try:
        locator = await store.upload(metadata.to_dict())
    except LensPublishError:
        raise
    except Exception as e:
        raise MetadataUploadError(f"Metadata upload failed: {e}") from e

    request = build_submission_request(draft, profile, locator, parent, settings.content_uri_prefix)
    return PreparedSubmission(metadata=metadata, locator=locator, request=request)


def build_queue_entry(
    draft: PublicationDraft, outcome: DispatchOutcome, parent: ParentPublication | None = None
) -> TransactionQueueEntry:
    """Build the optimistic queue entry for an accepted submission."""
    is_audio = is_audio_publication(draft.attachments)
    return TransactionQueueEntry(
        id=str(uuid.uuid4()),
        kind=QueueEntryKind.NEW_COMMENT if parent is not None else QueueEntryKind.NEW_POST,
        parent_id=parent.id if parent is not None else None,
        tx_hash=outcome.tx_hash,
        tx_id=outcome.tx_id,
        content=draft.text,
        attachments=tuple(draft.attachments),
        audio_title=draft.audio.title if is_audio else None,
        audio_cover=draft.audio.cover if is_audio else None,
        audio_author=draft.audio.author if is_audio else None,
    )


class PublicationComposer:
    """Composer session for one post or comment target.

    Holds the draft, the inline validation error and the submitting flag.
    Only one submission may be in flight at a time.
    A dispatcher without an explicit relay flag follows settings.relay_on.
    """

    def __init__(
        self,
        profile: Profile | None,
        store: ContentStore,
        dispatcher: DispatchStrategySelector,
        queue: TransactionQueue,
        settings: Settings | None = None,
        parent: ParentPublication | None = None,
        text_image: TextImageFn | None = None,
        tag_extractor: Callable[[str], list[str]] = get_tags,
        error_reporter: Callable[[Exception], None] = report_error,
        clock: Callable[[], datetime] | None = None,
    ):
        self.profile = profile
        self.store = store
        self.dispatcher = dispatcher
        self.queue = queue
        self.settings = settings or Settings()
        if dispatcher.relay_on is None:
            dispatcher.relay_on = self.settings.relay_on
        self.parent = parent
        self.text_image = text_image
        self.tag_extractor = tag_extractor
        self.error_reporter = error_reporter
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.draft = PublicationDraft()
        self.content_error = ""
        self.submitting = False
        self._listeners: list[CompletionListener] = []

    @property
    def is_comment(self) -> bool:
        return self.parent is not None

    def set_audio_metadata(self, audio: AudioMetadata) -> None:
        """Replace audio metadata, clearing any shown validation error."""
        self.draft.audio = audio
        self.content_error = ""

    def add_completion_listener(self, listener: CompletionListener) -> None:
        self._listeners.append(listener)

    async def submit(self) -> SubmissionResult:
        """Submit the current draft.

        CONTRACT:
          Outputs:
            - result: SubmissionResult with the queued entry and dispatch outcome

          Invariants:
            - Validation completes before any network call
            - A mirror parent must resolve to its original before anything is uploaded
            - submitting is True only while a submission is in flight
            - On success: exactly one entry is prepended to the queue, the draft
              is reset and completion listeners are notified
            - A failing listener is reported and does not stop the others
            - On failure: queue and draft are unchanged

          Raises:
            - NoProfileError: No authenticated profile
            - SubmissionInProgressError: Another submission is in flight
            - ValidationError: Draft rejected (message also stored in content_error)
            - SubmissionFailedError: Transport or signing failure, reported first
        """
        if self.profile is None:
            raise NoProfileError(SIGN_WALLET)
        if self.submitting:
            raise SubmissionInProgressError("A submission is already in progress")

        self.submitting = True
        try:
            try:
                validate_draft(self.draft, self.is_comment)
                if self.parent is not None:
                    resolve_publication_id(self.parent)
            except ValidationError as e:
                self.content_error = str(e)
                raise
            self.content_error = ""

            snapshot = copy.deepcopy(self.draft)
            try:
                result = await self._submit(snapshot, self.profile)
            except ValidationError:
                raise
            except Exception as e:
                self.error_reporter(e)
                raise SubmissionFailedError(f"Submission failed: {e}", cause=e) from e

            self._complete(result.entry)
            return result
        finally:
            self.submitting = False

    async def _submit(self, draft: PublicationDraft, profile: Profile) -> SubmissionResult:
        prepared = await prepare_submission(
            draft,
            profile,
            self.store,
            self.clock(),
            settings=self.settings,
            parent=self.parent,
            text_image=self.text_image,
            tag_extractor=self.tag_extractor,
        )
        outcome = await self.dispatcher.dispatch(prepared.request, self.is_comment, profile.can_use_relay)

        entry = build_queue_entry(draft, outcome, self.parent)
        self.queue.prepend(entry)
        logger.info(
            "Accepted %s via %s (tx_hash=%s, tx_id=%s)",
            entry.kind.value,
            outcome.path.value,
            entry.tx_hash,
            entry.tx_id,
        )
        return SubmissionResult(
            entry=entry,
            outcome=outcome,
            locator=prepared.locator,
            metadata=prepared.metadata,
            request=prepared.request,
        )

    def _complete(self, entry: TransactionQueueEntry) -> None:
        self.draft.reset()
        for listener in self._listeners:
            try:
                listener(entry)
            except Exception as e:
                self.error_reporter(e)
