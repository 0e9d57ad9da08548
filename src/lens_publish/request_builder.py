"""Submission request construction.

Maps draft, profile and metadata locator to the create-publication request.
"""

from .constants import DEFAULT_CONTENT_URI_PREFIX
from .errors import ValidationError
from .models import (
    DegreesOfSeparationReference,
    FollowersOnlyReference,
    ParentPublication,
    Profile,
    PublicationDraft,
    ReferenceModuleConfig,
    SubmissionRequest,
)


def resolve_publication_id(parent: ParentPublication) -> str:
    """Return the id a comment targets: the original for mirrors, else the parent itself."""
    if parent.is_mirror:
        if not parent.mirror_of_id:
            raise ValidationError(f"Mirror {parent.id} has no mirrored publication id")
        return parent.mirror_of_id
    return parent.id


def build_reference_module(config: ReferenceModuleConfig) -> dict:
    """Build the reference module payload.

    Degrees-of-separation always restricts both comments and mirrors.
    """
    if isinstance(config, FollowersOnlyReference):
        return {"followerOnlyReferenceModule": bool(config.followers_only)}
    if isinstance(config, DegreesOfSeparationReference):
        return {
            "degreesOfSeparationReferenceModule": {
                "commentsRestricted": True,
                "mirrorsRestricted": True,
                "degreesOfSeparation": config.degrees_of_separation,
            }
        }
    raise TypeError(f"Unsupported reference module config: {type(config).__name__}")


def content_uri(locator: str, prefix: str = DEFAULT_CONTENT_URI_PREFIX) -> str:
    return f"{prefix}{locator}"


def build_submission_request(
    draft: PublicationDraft,
    profile: Profile,
    locator: str,
    parent: ParentPublication | None = None,
    uri_prefix: str = DEFAULT_CONTENT_URI_PREFIX,
) -> SubmissionRequest:
    """Build the normalized submission request.

    CONTRACT:
      Inputs:
        - draft: PublicationDraft
        - profile: Profile of the author
        - locator: string, metadata locator returned by content storage
        - parent: ParentPublication when commenting, None for posts
        - uri_prefix: string prepended to locator to form the content URI

      Outputs:
        - request: SubmissionRequest

      Invariants:
        - publication_id is None for posts
        - publication_id for a comment on a mirror is the mirrored original's id
        - collect_module is the draft's collect module payload unchanged
        - reference_module is built from the draft's reference module config
    """
    return SubmissionRequest(
        profile_id=profile.id,
        content_uri=content_uri(locator, uri_prefix),
        collect_module=draft.collect_module,
        reference_module=build_reference_module(draft.reference_module),
        publication_id=resolve_publication_id(parent) if parent is not None else None,
    )
