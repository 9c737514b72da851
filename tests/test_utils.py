"""
Period and formatting helper tests
"""

from datetime import datetime

import pytest

from models import CallRecord
from utils import format_call_details, format_duration, period_range

NOW = datetime(2024, 3, 14, 15, 30, 0)  # Thursday


def ts(*args):
    return int(datetime(*args).timestamp())


class TestPeriodRange:
    """period_range()"""

    def test_today(self):
        assert period_range("today", NOW) == (ts(2024, 3, 14), ts(2024, 3, 14, 23, 59, 59))

    def test_yesterday(self):
        assert period_range("yesterday", NOW) == (ts(2024, 3, 13), ts(2024, 3, 13, 23, 59, 59))

    def test_week_starts_on_monday(self):
        assert period_range("week", NOW) == (ts(2024, 3, 11), ts(2024, 3, 14, 15, 30, 0))

    def test_month(self):
        assert period_range("month", NOW) == (ts(2024, 3, 1), ts(2024, 3, 31, 23, 59, 59))

    def test_december(self):
        assert period_range("month", datetime(2024, 12, 5, 10, 0)) == (
            ts(2024, 12, 1), ts(2024, 12, 31, 23, 59, 59)
        )

    def test_unknown_period(self):
        with pytest.raises(ValueError):
            period_range("decade", NOW)


class TestFormatDuration:
    """format_duration()"""

    @pytest.mark.parametrize("seconds,expected", [
        (0, "0 sec"),
        (45, "45 sec"),
        (125, "2 min 5 sec"),
        (3725, "1 hr 2 min 5 sec"),
    ])
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


class TestFormatCallDetails:
    """format_call_details()"""

    def make_call(self, **overrides):
        values = dict(
            records=["rec1", "rec2"],
            start=1600000000,
            finish=1600000120,
            answer=1600000010,
            from_extension="101",
            from_number="74950000001",
            to_extension="",
            to_number="74951234567",
            disconnect_reason=1100,
            line_number="74957654321",
            location="abonent",
            entry_id="MToxMDA2",
        )
        values.update(overrides)
        return CallRecord(**values)

    def test_answered_call(self):
        message = format_call_details(self.make_call())

        assert "Call MToxMDA2" in message
        assert "From: 74950000001 (ext. 101)" in message
        assert "To: 74951234567" in message
        assert "Duration: 2 min 0 sec" in message
        assert "Talk Time: 1 min 50 sec" in message
        assert "Answered: Yes" in message
        assert "Disconnect Reason: 1100" in message
        assert "Recordings: 2" in message

    def test_missed_call(self):
        message = format_call_details(self.make_call(answer=0, records=[], to_number="", to_extension="102"))

        assert "To: ext. 102" in message
        assert "Talk Time: 0 sec" in message
        assert "Answered: No" in message
        assert "Recordings: 0" in message

    def test_unknown_party(self):
        message = format_call_details(self.make_call(from_extension="", from_number=""))
        assert "From: Unknown" in message
