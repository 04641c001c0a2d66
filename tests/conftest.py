import pytest

from docdrop.config import Settings


@pytest.fixture
def make_settings(tmp_path):
    """Build settings rooted in a fresh temporary directory."""
    root = tmp_path / "docs"

    def _make(**overrides):
        values = dict(
            DOCS_ROOT=str(root),
            MAX_DOC_SIZE=1024,
            MAX_DOC_COUNT=100,
            DEFAULT_LIFETIME=3600.0,
            DEFAULT_NAME_LENGTH=9,
            DEFAULT_NAME_CHARSET="abcdefghijklmnopqrstuvwxyz0123456789",
            NAME_MAX_ATTEMPTS=100000,
            LOG_LEVEL="WARNING",
        )
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def docs_root(tmp_path):
    return tmp_path / "docs"


async def body(*parts: bytes):
    """Async payload stream yielding the given chunks."""
    for part in parts:
        yield part
