from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def reset_settings() -> Iterator[None]:
    """Restore default library settings around each test."""
    import arraylegacy.settings as settings

    settings.reset_settings()

    yield

    settings.reset_settings()
