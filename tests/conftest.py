import itertools

import pytest

from sergey.compiler import Compiler
from sergey.fragments import FragmentStore


@pytest.fixture()
def store():
    return FragmentStore("_imports")


@pytest.fixture()
def compiler(store):
    counter = itertools.count(1)
    return Compiler(store, marker_factory=lambda: f"m{next(counter)}")
