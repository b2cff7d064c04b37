from datetime import datetime

import pytest


@pytest.fixture
def timestamp():
    return datetime(2024, 5, 17, 13, 45, 30)


@pytest.fixture
def two_entries():
    return [("a.txt", "hi"), ("b.txt", "bye")]
