"""Unit tests for the bounded retry helper."""

from __future__ import annotations

import logging

import pytest
from pymongo.errors import AutoReconnect, DuplicateKeyError

from docstore.document.retry import is_transient, retry
from docstore.utilities.provider_error import NotFoundError


class FlakyCall:
    def __init__(self, *errors: Exception, result: str = "ok") -> None:
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


def test_retry_returns_first_success() -> None:
    """A call that succeeds right away is made once."""
    call = FlakyCall()

    assert retry(5, call) == "ok"
    assert call.calls == 1


def test_retry_succeeds_on_last_attempt() -> None:
    """Four transient failures still leave room for a fifth, successful attempt."""
    call = FlakyCall(*[AutoReconnect(f"down {i}") for i in range(4)])

    assert retry(5, call) == "ok"
    assert call.calls == 5


def test_retry_raises_last_error_when_every_attempt_fails() -> None:
    """The surfaced error is the one from the final attempt."""
    call = FlakyCall(*[AutoReconnect(f"down {i}") for i in range(5)])

    with pytest.raises(AutoReconnect, match="down 4"):
        retry(5, call)

    assert call.calls == 5


def test_retry_does_not_retry_not_found() -> None:
    """Not-found is a semantic answer, not a transient failure."""
    call = FlakyCall(NotFoundError("missing"))

    with pytest.raises(NotFoundError):
        retry(5, call)

    assert call.calls == 1


def test_retry_does_not_retry_duplicate_keys() -> None:
    """A duplicate key fails identically on every attempt."""
    call = FlakyCall(DuplicateKeyError("E11000"))

    with pytest.raises(DuplicateKeyError):
        retry(5, call)

    assert call.calls == 1


def test_retry_does_not_swallow_programming_errors() -> None:
    """Errors that are not driver errors propagate immediately."""
    call = FlakyCall(TypeError("bad filter"))

    with pytest.raises(TypeError):
        retry(5, call)

    assert call.calls == 1


def test_retry_logs_each_failed_attempt(caplog: pytest.LogCaptureFixture) -> None:
    """Every failure is logged: retries with their attempt number, then the final one."""
    call = FlakyCall(*[AutoReconnect("down") for _ in range(3)])

    with caplog.at_level(logging.ERROR, logger="docstore"), pytest.raises(AutoReconnect):
        retry(3, call)

    messages = [record.getMessage() for record in caplog.records]
    assert sum("Attempt failed. Retrying." in message for message in messages) == 2
    assert "attempt=1" in messages[0]
    assert "Last attempt failed. Not retrying." in messages[-1]
    assert "attempt=3" in messages[-1]


def test_retry_rejects_non_positive_attempts() -> None:
    with pytest.raises(ValueError):
        retry(0, FlakyCall())


def test_is_transient_classifies_errors() -> None:
    assert is_transient(AutoReconnect("down"))
    assert not is_transient(NotFoundError("missing"))
    assert not is_transient(ValueError("nope"))
