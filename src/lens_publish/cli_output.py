"""CLI output formatting for structured JSON results."""

import json

from .composer import PreparedSubmission


def format_prepared_submission(prepared: PreparedSubmission) -> str:
    """Format a prepared submission as a single JSON object.

    CONTRACT:
      Inputs:
        - prepared: PreparedSubmission with metadata, locator and request

      Outputs:
        - json_string: single-line JSON string
          Example: '{"contentURI": "https://arweave.net/ab12...", "locator": "ab12...", "metadata": {...},
                     "request": {...}}'

      Invariants:
        - Output is valid JSON (parseable by json.loads)
        - locator, contentURI, metadata and request always present
        - contentURI equals request.contentURI
        - No trailing newline (caller adds if needed)

      Properties:
        - Deterministic: same input produces same JSON output
        - Keys sorted, UTF-8 preserved
    """
    output = {
        "locator": prepared.locator,
        "contentURI": prepared.request.content_uri,
        "metadata": prepared.metadata.to_dict(),
        "request": prepared.request.to_dict(),
    }
    return json.dumps(output, ensure_ascii=False, sort_keys=True, separators=(", ", ": "))
