#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import json
import pathlib
from typing import Callable

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def config_file(tmp_path: pathlib.Path) -> Callable[[str], pathlib.Path]:
    """Fixture to write a TOML config file with the given content."""

    def _create_file(content: str) -> pathlib.Path:
        file_path = tmp_path / "ethconv.toml"
        file_path.write_text(content, encoding="utf-8")
        return file_path

    return _create_file


@pytest.fixture
def price_response():
    """Fixture building a fake urlopen response serving a JSON payload."""

    class DummyResp:
        def __init__(self, payload):
            self._body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

        def read(self, n: int = -1) -> bytes:
            return self._body

    return DummyResp
