"""CLI entrypoint for lens-publish.

Prepares a publication from a JSON draft: validates it, stores its metadata
in a local content-addressed store and prints the resulting request.
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from . import __version__
from .cli_output import format_prepared_submission
from .composer import prepare_submission
from .config import load_settings
from .draft_file import parse_draft
from .errors import LensPublishError
from .models import ParentPublication, Profile
from .storage import LocalContentStore
from .text_image import TextImageRenderer
from .validator import validate_draft


def main(argv: list[str] | None = None) -> int:
    """Main CLI entrypoint.

    CONTRACT:
      Inputs:
        - argv: list of command-line argument strings (or None to use sys.argv)

      Outputs:
        - exit_code: integer, 0 for success, non-zero for failure

      Invariants:
        - Draft is validated before anything is written to the store
        - Prints a single JSON object to stdout on success
        - Prints "ERROR: {error_type}: {message}" to stderr on failure

      Algorithm:
        1. Parse CLI arguments
        2. Load settings from environment (.env honoured); --store overrides store_dir
        3. Read and parse the draft file
        4. Validate the draft (comment rules when --comment-on is given)
        5. Prepare the submission:
           a. Render and store a text image unless --no-text-image
           b. Build and store metadata
           c. Build the submission request
        6. Print the formatted result and return 0

      Raises:
        - Does not raise (catches all exceptions and converts to exit codes)
    """
    try:
        args = parse_arguments(argv if argv is not None else sys.argv[1:])
        configure_logging(args["verbose"])

        settings = load_settings()
        if args["store"] is not None:
            settings = replace(settings, store_dir=args["store"])

        draft = parse_draft(read_draft_file(args["file"]))
        parent = None
        if args["comment_on"] is not None:
            if args["mirror_of"] is not None:
                parent = ParentPublication(id=args["comment_on"], typename="Mirror", mirror_of_id=args["mirror_of"])
            else:
                parent = ParentPublication(id=args["comment_on"])

        validate_draft(draft, is_comment=parent is not None)

        store = LocalContentStore(settings.store_dir)
        renderer = None if args["no_text_image"] else TextImageRenderer(store, settings.content_uri_prefix)
        profile = Profile(id=args["profile_id"], handle=args["handle"])

        prepared = asyncio.run(
            prepare_submission(
                draft,
                profile,
                store,
                datetime.now(timezone.utc),
                settings=settings,
                parent=parent,
                text_image=renderer,
            )
        )

        print(format_prepared_submission(prepared))
        return 0

    except LensPublishError as e:
        sys.stderr.write(f"ERROR: {type(e).__name__}: {str(e)}\n")
        return 1
    except FileNotFoundError as e:
        sys.stderr.write(f"ERROR: FileNotFoundError: {str(e)}\n")
        return 1
    except PermissionError as e:
        sys.stderr.write(f"ERROR: PermissionError: {str(e)}\n")
        return 1
    except UnicodeDecodeError as e:
        sys.stderr.write(f"ERROR: UnicodeDecodeError: {str(e)}\n")
        return 1
    except SystemExit:
        raise
    except Exception as e:
        sys.stderr.write(f"ERROR: {type(e).__name__}: {str(e)}\n")
        return 1


def parse_arguments(argv: list[str]) -> dict:
    """Parse CLI arguments into structured dictionary.

    Keys: file, profile_id, handle, comment_on, mirror_of, store, no_text_image, verbose.
    --mirror-of is only valid together with --comment-on.
    """
    parser = argparse.ArgumentParser(
        prog="lens-publish", description="Prepare a Lens publication: validate, store metadata, build the request"
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("file", help="JSON draft file")
    parser.add_argument("--profile-id", dest="profile_id", required=True, help="Author profile id (e.g. 0x01)")
    parser.add_argument("--handle", dest="handle", required=True, help="Author handle (e.g. alice.lens)")
    parser.add_argument(
        "--comment-on", dest="comment_on", default=None, help="Publication id to comment on (omit for a post)"
    )
    parser.add_argument(
        "--mirror-of",
        dest="mirror_of",
        default=None,
        help="When --comment-on is a mirror, the id of the mirrored publication",
    )
    parser.add_argument(
        "--store", dest="store", default=None, help="Content store directory (default: LENS_PUBLISH_STORE_DIR)"
    )
    parser.add_argument(
        "--no-text-image",
        dest="no_text_image",
        action="store_true",
        help="Do not render a text-as-image cover for publications without attachments",
    )
    parser.add_argument("--verbose", "-v", dest="verbose", action="store_true", help="Enable debug logging")

    parsed = parser.parse_args(argv)

    if parsed.mirror_of is not None and parsed.comment_on is None:
        parser.error("--mirror-of requires --comment-on")

    return {
        "file": Path(parsed.file),
        "profile_id": parsed.profile_id,
        "handle": parsed.handle,
        "comment_on": parsed.comment_on,
        "mirror_of": parsed.mirror_of,
        "store": parsed.store,
        "no_text_image": parsed.no_text_image,
        "verbose": parsed.verbose,
    }


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def read_draft_file(file_path: Path) -> str:
    """Read draft file content as UTF-8.

    Raises:
      - FileNotFoundError: File does not exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    return file_path.read_text(encoding="utf-8")


if __name__ == "__main__":
    sys.exit(main())
