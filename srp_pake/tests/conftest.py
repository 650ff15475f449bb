"""Shared fixtures for the SRP engine tests."""

import logging
import sys
from typing import Iterable, List

import pytest

from srp_pake.groups.catalog import lookup
from srp_pake.kdf.records import create_user_record


IDENTITY = "alice"
PASSWORD = "correcthorse"
FIXED_SALT = bytes.fromhex("0102030405060708090a0b0c0d0e0f10")


class ScriptedRandom:
    """Random source replaying fixed byte strings, then falling back to a counter.

    Parameters
    ----------
    chunks : Iterable[bytes]
        Values returned by the first calls, in order. Each must have the
        requested length.
    """

    def __init__(self, chunks: Iterable[bytes] = ()) -> None:
        self._chunks: List[bytes] = list(chunks)
        self._counter = 0
        self.calls = 0

    def __call__(self, num_bytes: int) -> bytes:
        self.calls += 1
        if self._chunks:
            return self._chunks.pop(0)
        self._counter += 1
        return (self._counter * 0x9E3779B97F4A7C15).to_bytes(num_bytes, "big")


@pytest.fixture
def fast_group():
    """Smallest catalog group, for tests that only need correct arithmetic."""
    return lookup("1024")


@pytest.fixture
def group_2048():
    """Default 2048-bit catalog group."""
    return lookup("2048")


@pytest.fixture
def scripted_rng():
    """Factory for deterministic random sources."""
    return ScriptedRandom


@pytest.fixture
def alice_record(fast_group):
    """Record for alice/correcthorse in the fast group with a fixed salt."""
    return create_user_record(IDENTITY, PASSWORD, fast_group, salt=FIXED_SALT)


def _engine_stream_handlers() -> List[logging.StreamHandler]:
    handlers = []
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith("srp_pake") and isinstance(logger, logging.Logger):
            handlers.extend(h for h in logger.handlers if type(h) is logging.StreamHandler)
    return handlers


class _CurrentStderr:
    """Stream that forwards to whatever ``sys.stderr`` is at write time."""

    def write(self, text):
        return sys.stderr.write(text)

    def flush(self):
        sys.stderr.flush()


@pytest.fixture
def engine_stderr(capfd):
    """Point engine log handlers at the captured stderr for one test.

    Handlers bind ``sys.stderr`` when their logger is first created, which
    is usually before ``capfd`` starts capturing. Streams are swapped by
    assignment rather than ``setStream`` so stale capture files, which
    pytest may already have closed, are never flushed.
    """
    original = {handler: handler.stream for handler in _engine_stream_handlers()}
    fallback = next(iter(original.values()), sys.__stderr__)
    proxy = _CurrentStderr()
    for handler in original:
        handler.stream = proxy
    yield capfd
    for handler in _engine_stream_handlers():
        handler.stream = original.get(handler, fallback)
