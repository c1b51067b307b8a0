"""Tests for logging context propagation."""

import asyncio

import pytest

from workmatch.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


def test_context_starts_empty():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(request_id="req-1", job_id="job-1")
    assert get_log_context() == {"request_id": "req-1", "job_id": "job-1"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_pushes_unwind_in_order():
    outer = push_log_context(request_id="req-1")
    inner = push_log_context(job_id="job-1")
    assert get_log_context() == {"request_id": "req-1", "job_id": "job-1"}

    pop_log_context(inner)
    assert get_log_context() == {"request_id": "req-1"}

    pop_log_context(outer)
    assert get_log_context() == {}


def test_inner_value_shadows_outer():
    with log_context(job_id="job-1"):
        with log_context(job_id="job-2"):
            assert get_log_context() == {"job_id": "job-2"}
        assert get_log_context() == {"job_id": "job-1"}


def test_context_manager_restores_after_exception():
    with pytest.raises(LookupError):
        with log_context(request_id="req-1"):
            raise LookupError("job missing")

    assert get_log_context() == {}


def test_clear_context():
    push_log_context(request_id="req-1")

    clear_log_context()

    assert get_log_context() == {}


def test_returned_context_is_a_copy():
    with log_context(request_id="req-1"):
        context = get_log_context()
        context["worker_id"] = "w-1"

        assert get_log_context() == {"request_id": "req-1"}


def test_concurrent_requests_keep_separate_contexts():
    """Each task sees only the request id it pushed."""

    async def serve(request_id):
        with log_context(request_id=request_id):
            await asyncio.sleep(0)
            return get_log_context()["request_id"]

    async def serve_all():
        return await asyncio.gather(serve("req-a"), serve("req-b"), serve("req-c"))

    assert asyncio.run(serve_all()) == ["req-a", "req-b", "req-c"]
    assert get_log_context() == {}
