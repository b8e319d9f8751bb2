# Shared fixtures for the binding list and snapshot tests.
# Record and listener helpers live in tests/factories.py.

from __future__ import annotations

import pytest

from tests.factories import EventRecorder, make_rows


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def rows():
    return make_rows()
