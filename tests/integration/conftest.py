"""Shared fixtures for integration tests.

Integration tests wire the real LocalContentStore, TextImageRenderer and
Settings together with the in-memory relay, signer and chain from
tests/conftest.py.

Settings are read from the environment (and a .env file, if present, via
python-dotenv) so that LENS_PUBLISH_* overrides apply to test runs the same
way they apply to the CLI. The store directory is always a temporary path.
"""

from dataclasses import replace

import pytest
from dotenv import load_dotenv

from lens_publish.config import load_settings
from lens_publish.storage import LocalContentStore
from lens_publish.text_image import TextImageRenderer

load_dotenv()


@pytest.fixture
def integration_settings(tmp_path):
    """Environment settings with the store redirected to a temporary directory."""
    return replace(
        load_settings(dotenv=False), store_dir=str(tmp_path / "store"), content_uri_prefix="https://arweave.net/"
    )


@pytest.fixture
def local_store(integration_settings):
    return LocalContentStore(integration_settings.store_dir)


@pytest.fixture
def text_renderer(local_store, integration_settings):
    return TextImageRenderer(local_store, integration_settings.content_uri_prefix)
