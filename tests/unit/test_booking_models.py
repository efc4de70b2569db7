"""Tests for booking models and site date/time formats."""

from datetime import date, time

import pytest

from squashaat.models.booking_models import Booking, BookingSet
from squashaat.utils.time_formats import (
    date_from_url,
    date_page,
    format_start_time,
    parse_date_argument,
    parse_date_page,
    parse_dropdown_date,
    parse_start_time,
)


class TestBookingSet:
    """Tests for BookingSet."""

    def test_bookings_compare_by_value(self):
        """Test an equal booking removes the recorded one."""
        bookings = BookingSet()
        bookings.add(Booking(2, time(10, 45), date(2016, 1, 5)))

        bookings.remove(Booking(2, time(10, 45), date(2016, 1, 5)))

        assert bookings.is_empty()

    def test_add_ignores_duplicates(self):
        bookings = BookingSet()
        booking = Booking(1, time(10, 0), date(2016, 1, 5), "J.Khan/R.Ashour")
        bookings.add(booking)
        bookings.add(booking)

        assert len(bookings) == 1
        assert booking in bookings

    def test_remove_unknown_booking(self):
        bookings = BookingSet()
        bookings.remove(Booking(1, time(10, 0), date(2016, 1, 5)))

        assert bookings.is_empty()

    def test_iteration_allows_removal(self):
        bookings = BookingSet()
        bookings.add(Booking(1, time(10, 0), date(2016, 1, 5)))
        bookings.add(Booking(2, time(10, 0), date(2016, 1, 5)))

        for booking in bookings:
            bookings.remove(booking)

        assert bookings.is_empty()

    def test_clear(self):
        bookings = BookingSet()
        bookings.add(Booking(1, time(10, 0), date(2016, 1, 5)))
        bookings.clear()

        assert len(bookings) == 0

    def test_describe(self):
        booking = Booking(3, time(18, 30), date(2016, 1, 5))

        assert booking.describe() == "court 3 at 18:30 on 2016-01-05 (A.Shabana/J.Power)"


class TestTimeFormats:
    """Tests for the site's date and time formats."""

    @pytest.mark.parametrize(
        "text,expected",
        [("10:15 AM", time(10, 15)), ("9:45 PM", time(21, 45)), ("12:00 pm", time(12, 0))],
    )
    def test_parse_start_time(self, text, expected):
        assert parse_start_time(text) == expected

    def test_parse_start_time_rejects_24_hour(self):
        with pytest.raises(ValueError, match="expected e.g. '10:15 AM'"):
            parse_start_time("21:45")

    def test_format_start_time_has_no_leading_zero(self):
        assert format_start_time(time(9, 0)) == "9:00 AM"
        assert format_start_time(time(21, 45)) == "9:45 PM"

    def test_dropdown_date(self):
        assert parse_dropdown_date("Wed, 23 Dec, 2015") == date(2015, 12, 23)

    def test_date_page(self):
        assert date_page(date(2015, 12, 23)) == "2015-12-23.html"
        assert parse_date_page("2015-12-23.html") == date(2015, 12, 23)

    def test_date_from_url(self):
        assert date_from_url("http://squash.example/2015-10-22.html") == "2015-10-22"
        assert date_from_url("http://squash.example/2015-10-22f00d.html") == "2015-10-22"
        assert date_from_url("http://squash.example/") is None

    def test_parse_date_argument(self):
        assert parse_date_argument("2016-01-05") == date(2016, 1, 5)
        assert parse_date_argument("Today") == date.today()
        assert parse_date_argument(date(2016, 1, 5)) == date(2016, 1, 5)
