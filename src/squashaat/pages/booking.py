"""Page objects for the squash court booking site.

The booking page for each date is served from an eventually-consistent
store, so loading it after a booking or cancellation goes through the
consistency check of the readiness resolver. The reservation,
cancellation and error pages are only ever reached by clicking.
"""

from __future__ import annotations

import logging
from datetime import date, time
from typing import Any, Dict, List, Optional, Union

from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions
from selenium.webdriver.support.ui import Select

from squashaat.errors import PageAssertionError
from squashaat.pages.base import BasePage
from squashaat.utils.time_formats import (
    date_from_url,
    date_page,
    format_start_time,
    parse_date_page,
    parse_dropdown_date,
    parse_start_time,
)

logger = logging.getLogger(__name__)

VALID_COURTS = range(1, 6)

INVALID_INPUT = (By.CSS_SELECTOR, "input:invalid")


class CourtAndTimeSlotChooserPage(BasePage):
    """The booking page showing every court and time slot for one date."""

    TIME_LABEL = (By.CLASS_NAME, "timeLabel")
    RESERVATION_BUTTON = (By.CLASS_NAME, "reservationButton")
    CANCELLATION_BUTTON = (By.CLASS_NAME, "cancellationButton")
    DATE_DROPDOWN = (By.CLASS_NAME, "dateDropdown")
    GO_BUTTON = (By.ID, "goButton")
    PAGE_GUID = (By.ID, "pageGuid")
    BOOKING_TABLE = (By.CLASS_NAME, "bookingTable")

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def logical_key(self) -> str:
        # One key per date: booking pages for different dates change independently
        current_url = self.driver.current_url()
        page_date = date_from_url(current_url) or current_url.rsplit("/", 1)[-1]
        return f"{type(self).__name__}{page_date}"

    def canonical_url(self) -> Optional[str]:
        return self.config.base_url

    def await_ready(self) -> None:
        self.driver.wait_until(
            expected_conditions.visibility_of_all_elements_located(self.BOOKING_TABLE),
            self.session.resolver.settings.explicit_wait,
            description="booking table to be visible",
        )
        self.wait_for_visible(*self.DATE_DROPDOWN)

    def capture_marker(self) -> Optional[Any]:
        # Time slot labels are replaced on redraw and on navigating away
        labels = self.driver.find_elements(*self.TIME_LABEL)
        return labels[0] if labels else None

    def is_consistent(self, expect_changed: bool) -> bool:
        guids = self.driver.find_elements(*self.PAGE_GUID)
        token = guids[0].get_attribute("innerHTML") if guids else None
        return self.session.consistency.evaluate(
            self.logical_key(),
            token,
            expect_changed,
            is_empty_state=self.has_no_bookings,
        )

    def assert_ready(self) -> None:
        if not self.driver.find_element(*self.BOOKING_TABLE).is_displayed():
            raise PageAssertionError(
                "The CourtAndTimeSlotBooking page is not loaded (booking table not visible)"
            )
        if not self.driver.find_element(*self.DATE_DROPDOWN).is_displayed():
            raise PageAssertionError(
                "The CourtAndTimeSlotBooking page is not loaded "
                "(date selector dropdown not visible)"
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_no_bookings(self) -> bool:
        return not self.driver.find_elements(*self.CANCELLATION_BUTTON)

    def start_times(self) -> List[time]:
        """All bookable start times, earliest first.

        Labels appear on both sides of the table, so duplicates are dropped.
        """
        labels = self.driver.find_elements(*self.TIME_LABEL)
        return sorted({parse_start_time(label.text) for label in labels})

    def booking_dates(self) -> List[date]:
        """All dates offered in the date dropdown, earliest first."""
        options = self._date_select().options
        return sorted(parse_dropdown_date(option.text) for option in options)

    def booked_start_times(self) -> Dict[int, List[time]]:
        """Booked start times per court, read from the cancellation buttons."""
        starts = self.start_times()
        booked: Dict[int, List[time]] = {}
        for button in self.driver.find_elements(*self.CANCELLATION_BUTTON):
            court, start = self._court_and_time_of(button, starts)
            booked.setdefault(court, []).append(start)
        return booked

    def booked_court_count(self) -> int:
        return sum(len(times) for times in self.booked_start_times().values())

    def current_date(self) -> date:
        """The date whose bookings are shown, read from the selected dropdown option."""
        selected = self._date_select().all_selected_options[0]
        return parse_date_page(selected.get_attribute("value"))

    def is_court_booked_at(self, court: int, start: Union[str, time]) -> bool:
        return parse_start_time(start) in self.booked_start_times().get(court, [])

    def is_court_number_valid(self, court: int) -> bool:
        return court in VALID_COURTS

    def is_start_time_valid(self, start: Union[str, time]) -> bool:
        return parse_start_time(start) in self.start_times()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def select_date(self, target: date) -> "CourtAndTimeSlotChooserPage":
        """Show the bookings for ``target`` and wait for that page to load."""
        select = self._date_select()
        if parse_dropdown_date(select.first_selected_option.text) == target:
            return self

        # Read the marker while the current date's page is still shown
        marker = self.cached_marker()
        select.select_by_value(date_page(target))
        # Clicking Go with javascript enabled risks a stale reference
        if not self.config.javascript_enabled:
            self.driver.find_element(*self.GO_BUTTON).click()

        return self.get(
            already_navigating=True,
            marker=marker,
            expect_changed=False,
        )

    def book_court(
        self,
        court: int,
        start: Union[str, time],
        player1: str,
        player2: str,
        password: str,
        expect_success: bool = True,
    ) -> BasePage:
        """Click the reservation button for ``court`` at ``start`` and submit the form.

        Returns:
            The page shown once the submission has been handled.
        """
        start = parse_start_time(start)
        button = self._find_button(self.RESERVATION_BUTTON, court, start)
        if button is None:
            raise PageAssertionError(
                f"Could not find matching reservation button for court {court} "
                f"at {format_start_time(start)}"
            )

        marker = self.cached_marker()
        button.click()
        reservation_page = CourtReservationPage(self.session).get(
            already_navigating=True, marker=marker
        )
        return reservation_page.submit_booking_details(
            player1, player2, password, expect_success
        )

    def cancel_court(
        self,
        court: int,
        start: Union[str, time],
        booking_date: date,
        name: str,
        password: str,
        expect_success: bool = True,
    ) -> BasePage:
        """Open the cancellation form for a booking and submit it.

        Returns:
            The page shown once the submission has been handled.
        """
        page = self.select_date(booking_date)
        start = parse_start_time(start)
        button = page._find_button(self.CANCELLATION_BUTTON, court, start)
        if button is None:
            raise PageAssertionError(
                f"Could not find matching cancellation button for court {court} "
                f"at {format_start_time(start)}"
            )

        marker = page.cached_marker()
        button.click()
        cancellation_page = CourtCancellationPage(self.session).get(
            already_navigating=True, marker=marker
        )
        return cancellation_page.submit_cancellation_details(
            name, password, expect_success
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _date_select(self) -> Select:
        return Select(self.driver.find_element(*self.DATE_DROPDOWN))

    def _find_button(self, locator: tuple, court: int, start: time) -> Optional[Any]:
        starts = self.start_times()
        for button in self.driver.find_elements(*locator):
            if self._court_and_time_of(button, starts) == (court, start):
                return button
        return None

    @staticmethod
    def _court_and_time_of(button: Any, starts: List[time]) -> tuple:
        court = int(button.get_attribute("data-court"))
        # Time slots are numbered from 1 in start time order
        time_slot = int(button.get_attribute("data-time_slot"))
        return court, starts[time_slot - 1]


class _SubmissionPage(BasePage):
    """A form page whose submission leads back to the booking page or to the error page."""

    def has_invalid_input(self) -> bool:
        """Whether the browser flagged any form input as invalid (HTML5 validation)."""
        return bool(self.driver.find_elements(*INVALID_INPUT))

    def _follow_submission(self, expect_success: bool) -> BasePage:
        if expect_success:
            return CourtAndTimeSlotChooserPage(self.session).get(
                already_navigating=True, expect_changed=True
            )
        if self.has_invalid_input():
            # Form validation stopped the submission
            logger.info(f"{type(self).__name__} rejected the details before submission")
            return self
        # The site rejected the details; some drivers skip the error page
        if self.config.error_page_redirects:
            return CourtAndTimeSlotChooserPage(self.session).get(
                already_navigating=True, expect_changed=False
            )
        return ErrorPage(self.session).get(already_navigating=True)


class CourtReservationPage(_SubmissionPage):
    """Form for booking a court."""

    RESERVATION_FORM = (By.CLASS_NAME, "reservation-form")
    PLAYER1_NAME = (By.CSS_SELECTOR, "input[name='player1name']")
    PLAYER2_NAME = (By.CSS_SELECTOR, "input[name='player2name']")
    PASSWORD = (By.CSS_SELECTOR, "input[name='password']")
    SUBMIT = (By.ID, "submitreservation")

    def await_ready(self) -> None:
        self.wait_for_visible(*self.RESERVATION_FORM)
        self.wait_for_visible(*self.PLAYER2_NAME)

    def assert_ready(self) -> None:
        if not self.driver.find_element(*self.RESERVATION_FORM).is_displayed():
            raise PageAssertionError("The reservation form is not visible")

    def submit_booking_details(
        self, player1: str, player2: str, password: str, expect_success: bool = True
    ) -> BasePage:
        self.driver.find_element(*self.PLAYER1_NAME).send_keys(player1)
        self.driver.find_element(*self.PLAYER2_NAME).send_keys(player2)
        self.driver.find_element(*self.PASSWORD).send_keys(password)
        self.driver.find_element(*self.SUBMIT).click()
        return self._follow_submission(expect_success)


class CourtCancellationPage(_SubmissionPage):
    """Form for cancelling a booking."""

    CANCELLATION_FORM = (By.CLASS_NAME, "cancellation-form")
    NAME = (By.CSS_SELECTOR, "input[name='name']")
    PASSWORD = (By.CSS_SELECTOR, "input[name='password']")
    SUBMIT = (By.CLASS_NAME, "button-submit")

    def await_ready(self) -> None:
        self.wait_for_visible(*self.CANCELLATION_FORM)
        self.wait_for_visible(*self.SUBMIT)

    def assert_ready(self) -> None:
        if not self.driver.find_element(*self.CANCELLATION_FORM).is_displayed():
            raise PageAssertionError("The cancellation form is not visible")

    def submit_cancellation_details(
        self, name: str, password: str, expect_success: bool = True
    ) -> BasePage:
        self.driver.find_element(*self.NAME).send_keys(name)
        self.driver.find_element(*self.PASSWORD).send_keys(password)
        self.driver.find_element(*self.SUBMIT).click()
        return self._follow_submission(expect_success)


class ErrorPage(BasePage):
    """Page shown when the site rejects a booking or cancellation."""

    TITLE = "Grrr"

    def await_ready(self) -> None:
        self.wait_for_title(self.TITLE)

    def assert_ready(self) -> None:
        if self.driver.title() != self.TITLE:
            raise PageAssertionError("The error page is not visible")
