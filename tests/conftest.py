"""Shared fixtures for circuit tests.

Randomness is drawn from a small deterministic counter so scalar
multiplications stay short and failures are reproducible.
"""

import itertools
import sys
from pathlib import Path

import pytest

root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from primitives.babyjub import mul_base  # noqa: E402

SENDER_SK = 7
RECEIVER_SK = 11
AUDITOR_SK = 13
CHAIN_ID = 1
ADDRESS = 0x8626F6940E2EB28930EFB4CEF49B2D1F2C9C1199


def make_rand(start: int = 1001):
    counter = itertools.count(start)
    return lambda: next(counter)


@pytest.fixture
def rand_scalar():
    return make_rand()


@pytest.fixture(scope="session")
def sender_pk():
    return mul_base(SENDER_SK)


@pytest.fixture(scope="session")
def receiver_pk():
    return mul_base(RECEIVER_SK)


@pytest.fixture(scope="session")
def auditor_pk():
    return mul_base(AUDITOR_SK)
