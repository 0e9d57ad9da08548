"""Unit tests for draft document parsing."""

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lens_publish.constants import CollectModules
from lens_publish.draft_file import ALLOWED_FIELDS, draft_from_dict, parse_draft
from lens_publish.errors import InvalidFieldTypeError, InvalidFieldValueError, MissingFieldError, UnknownFieldError
from lens_publish.models import (
    Attachment,
    AudioMetadata,
    DegreesOfSeparationReference,
    FollowersOnlyReference,
    PublicationDraft,
)


class TestParseDraft:
    def test_minimal(self):
        assert parse_draft('{"text": "hello"}') == PublicationDraft(text="hello")

    def test_empty_object_is_empty_draft(self):
        assert parse_draft("{}") == PublicationDraft()

    def test_invalid_json(self):
        with pytest.raises(InvalidFieldValueError):
            parse_draft("{not json")

    def test_full_document(self):
        document = {
            "text": "new track #music",
            "attachments": [{"item": "ar://song", "type": "audio/mpeg", "altTag": "song"}],
            "audio": {"title": "Song", "author": "Artist", "cover": "ar://cover", "coverMimeType": "image/jpeg"},
            "collectModule": {"type": "RevertCollectModule", "payload": {"revertCollectModule": True}},
            "referenceModule": {"degreesOfSeparation": 3},
        }
        draft = parse_draft(json.dumps(document))
        assert draft.text == "new track #music"
        assert draft.attachments == [Attachment(locator="ar://song", mime_type="audio/mpeg", alt_text="song")]
        assert draft.audio == AudioMetadata(
            title="Song", author="Artist", cover="ar://cover", cover_mime_type="image/jpeg"
        )
        assert draft.selected_collect_module == CollectModules.REVERT
        assert draft.collect_module == {"revertCollectModule": True}
        assert draft.reference_module == DegreesOfSeparationReference(degrees_of_separation=3)


class TestDraftFromDict:
    @given(st.text(min_size=1).filter(lambda s: s not in ALLOWED_FIELDS))
    def test_unknown_field_rejected(self, field):
        with pytest.raises(UnknownFieldError):
            draft_from_dict({"text": "x", field: 1})

    def test_not_an_object(self):
        with pytest.raises(InvalidFieldTypeError):
            draft_from_dict(["text"])

    def test_text_must_be_string(self):
        with pytest.raises(InvalidFieldTypeError):
            draft_from_dict({"text": 5})

    @given(st.lists(st.sampled_from(["image/png", "video/mp4", "audio/ogg"]), max_size=5))
    def test_attachment_order_preserved(self, mime_types):
        items = [{"item": f"ar://{i}", "type": mime} for i, mime in enumerate(mime_types)]
        draft = draft_from_dict({"attachments": items})
        assert [a.locator for a in draft.attachments] == [f"ar://{i}" for i in range(len(mime_types))]

    @pytest.mark.parametrize(
        "attachment, error",
        [
            ("ar://x", InvalidFieldTypeError),
            ({"type": "image/png"}, MissingFieldError),
            ({"item": "ar://x"}, MissingFieldError),
            ({"item": "", "type": "image/png"}, InvalidFieldValueError),
            ({"item": "ar://x", "type": "png"}, InvalidFieldValueError),
            ({"item": "ar://x", "type": "image/png", "altTag": 3}, InvalidFieldTypeError),
            ({"item": "ar://x", "type": "image/png", "size": 3}, UnknownFieldError),
        ],
    )
    def test_invalid_attachments(self, attachment, error):
        with pytest.raises(error):
            draft_from_dict({"attachments": [attachment]})

    def test_attachments_must_be_list(self):
        with pytest.raises(InvalidFieldTypeError):
            draft_from_dict({"attachments": {"item": "ar://x"}})

    def test_audio_partial_defaults_empty(self):
        assert draft_from_dict({"audio": {"title": "T"}}).audio == AudioMetadata(title="T")

    def test_audio_unknown_field(self):
        with pytest.raises(UnknownFieldError):
            draft_from_dict({"audio": {"genre": "jazz"}})

    def test_collect_module_default_payload(self):
        draft = draft_from_dict({"collectModule": {"type": "FreeCollectModule"}})
        assert draft.selected_collect_module == CollectModules.FREE
        assert draft.collect_module == {"freeCollectModule": {"followerOnly": False}}

    def test_collect_module_unknown_type(self):
        with pytest.raises(InvalidFieldValueError):
            draft_from_dict({"collectModule": {"type": "MysteryModule"}})

    def test_collect_module_missing_type(self):
        with pytest.raises(MissingFieldError):
            draft_from_dict({"collectModule": {}})

    @given(st.booleans())
    def test_followers_only(self, value):
        draft = draft_from_dict({"referenceModule": {"followersOnly": value}})
        assert draft.reference_module == FollowersOnlyReference(followers_only=value)

    @pytest.mark.parametrize(
        "reference, error",
        [
            ({}, InvalidFieldValueError),
            ({"followersOnly": True, "degreesOfSeparation": 2}, InvalidFieldValueError),
            ({"followersOnly": "yes"}, InvalidFieldTypeError),
            ({"degreesOfSeparation": True}, InvalidFieldTypeError),
            ({"degreesOfSeparation": "2"}, InvalidFieldTypeError),
            ({"degreesOfSeparation": 0}, InvalidFieldValueError),
        ],
    )
    def test_invalid_reference_module(self, reference, error):
        with pytest.raises(error):
            draft_from_dict({"referenceModule": reference})
