# Ensure project root is on sys.path so 'ircengine' and 'tests' are importable when
# running pytest from environments that don't automatically include it.
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.resolve()
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def reset_engine_logger(monkeypatch):
    """Keep the DEBUG switch from leaking between tests."""
    from ircengine.logs.logger import logger

    monkeypatch.delenv("DEBUG", raising=False)
    saved_debug = logger.debug
    saved_level = logger.logger.level
    yield
    logger.debug = saved_debug
    logger.logger.setLevel(saved_level)
