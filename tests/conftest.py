from __future__ import annotations

import pytest

from alphabet import Alphabet
from debug import COMPONENTS, Debug
from utilities import naval_config


@pytest.fixture(autouse=True)
def quiet_debug():
    dbg = Debug()
    yield dbg
    dbg.disable(*COMPONENTS)
    dbg.toggle_global(True)


@pytest.fixture
def upper() -> Alphabet:
    return Alphabet()


@pytest.fixture
def naval():
    """A fresh naval machine; every call builds new rotor objects."""
    return naval_config().build()
