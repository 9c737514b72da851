"""
Polling helper tests
"""

from unittest import mock

import pytest

from errors import StatsNotFoundError, StatsNotReadyError
from handlers import collect_stats, get_period_calls
from models import CallRecord


def make_call(entry_id="MToxMDA2"):
    return CallRecord(
        records=["rec1"],
        start=1600000000,
        finish=1600000060,
        answer=1600000005,
        from_extension="101",
        from_number="74950000001",
        to_extension="",
        to_number="74951234567",
        disconnect_reason=1100,
        line_number="74957654321",
        location="abonent",
        entry_id=entry_id,
    )


@pytest.fixture
def api():
    api = mock.Mock()
    api.request_stats_key.return_value = "abc123"
    return api


class TestCollectStats:
    """collect_stats()"""

    def test_polls_until_ready(self, api):
        calls = [make_call()]
        api.fetch_stats.side_effect = [StatsNotReadyError("abc123"), StatsNotReadyError("abc123"), calls]
        sleep = mock.Mock()

        result = collect_stats(api, 1, 2, "req-1", retry_delay=5, max_attempts=5, sleep=sleep)

        assert result == calls
        api.request_stats_key.assert_called_once_with(1, 2, "req-1")
        assert api.fetch_stats.call_count == 3
        api.fetch_stats.assert_called_with("abc123", "req-1")
        assert sleep.call_args_list == [mock.call(5), mock.call(5)]

    def test_ready_on_first_poll_does_not_sleep(self, api):
        api.fetch_stats.return_value = []
        sleep = mock.Mock()

        assert collect_stats(api, 1, 2, "req-1", sleep=sleep) == []
        sleep.assert_not_called()

    def test_gives_up_after_max_attempts(self, api):
        api.fetch_stats.side_effect = StatsNotReadyError("abc123")
        sleep = mock.Mock()

        with pytest.raises(StatsNotReadyError):
            collect_stats(api, 1, 2, "req-1", retry_delay=1, max_attempts=3, sleep=sleep)

        assert api.fetch_stats.call_count == 3
        assert sleep.call_count == 2

    def test_not_found_propagates_without_retry(self, api):
        api.fetch_stats.side_effect = StatsNotFoundError("abc123")
        sleep = mock.Mock()

        with pytest.raises(StatsNotFoundError):
            collect_stats(api, 1, 2, "req-1", sleep=sleep)

        assert api.fetch_stats.call_count == 1
        sleep.assert_not_called()

    def test_generates_request_id(self, api):
        api.fetch_stats.return_value = []

        collect_stats(api, 1, 2, sleep=mock.Mock())

        request_id = api.request_stats_key.call_args.args[2]
        assert isinstance(request_id, str)
        assert len(request_id) == 36
        api.fetch_stats.assert_called_once_with("abc123", request_id)


class TestGetPeriodCalls:
    """get_period_calls()"""

    def test_returns_calls(self, api):
        calls = [make_call("a"), make_call("b")]
        api.fetch_stats.return_value = calls

        result = get_period_calls(api, 1600000000, 1600086400, "today", request_id="req-1", sleep=mock.Mock())

        assert result == calls
        api.request_stats_key.assert_called_once_with(1600000000, 1600086400, "req-1")

    def test_no_calls(self, api):
        api.fetch_stats.return_value = []

        assert get_period_calls(api, 1600000000, 1600086400, "today", sleep=mock.Mock()) == []
