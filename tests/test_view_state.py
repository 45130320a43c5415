import asyncio

from invoice_analytics.client.api_client import ApiError
from invoice_analytics.client.view_state import ViewSession


def test_resolve_applies_latest_result():
    session = ViewSession()
    ticket = session.begin()
    assert session.state.loading

    assert session.resolve(ticket, ["invoice"])
    assert session.state.data == ["invoice"]
    assert not session.state.loading
    assert session.state.error is None


def test_stale_ticket_is_discarded():
    session = ViewSession()
    first = session.begin()
    second = session.begin()

    assert not session.resolve(first, "old")
    assert session.state.data is None
    assert session.state.loading

    assert session.resolve(second, "new")
    assert session.state.data == "new"


def test_results_after_close_are_discarded():
    session = ViewSession()
    ticket = session.begin()
    session.close()

    assert not session.resolve(ticket, "late")
    assert not session.fail(ticket, ApiError(500, "boom"))
    assert session.state.data is None
    assert session.state.error is None
    assert not session.state.loading


def test_failure_is_distinct_from_loading():
    session = ViewSession()
    ticket = session.begin()
    assert session.fail(ticket, ApiError(503, "Service unavailable"))
    assert session.state.error == "Service unavailable"
    assert not session.state.loading
    assert session.state.data is None


def test_load_runs_fetch_and_records_errors():
    session = ViewSession()

    async def ok():
        return 42

    async def broken():
        raise ApiError(None, "Network error")

    state = asyncio.run(session.load(ok))
    assert state.data == 42

    state = asyncio.run(session.load(broken))
    assert state.error == "Network error"
    assert state.data == 42


def test_sessions_do_not_share_state():
    first, second = ViewSession(), ViewSession()
    first.resolve(first.begin(), "one")
    assert second.state.data is None
