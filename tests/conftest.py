from __future__ import annotations

from typing import Iterator

import pytest

from adapt import config
from adapt.config import AdaptConfig


@pytest.fixture(autouse=True)
def _quiet_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[AdaptConfig]:
    # Pin a non-debug config so tests do not depend on ADAPT_* in the environment
    cfg = AdaptConfig(debug=False)
    monkeypatch.setattr(config, "_active", cfg)
    yield cfg
