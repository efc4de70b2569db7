"""BookingLibrary - keywords for acceptance testing the squash booking site.

Provides keywords to:
- Navigate to the booking page and view bookings for a date
- Book and cancel courts, expecting success or rejection
- Assert on booked courts, start times and the page shown
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from robot.api import logger as rf_logger
from robot.api.deco import keyword, library
from robot.libraries.BuiltIn import BuiltIn

from squashaat.config import SuiteConfig
from squashaat.lib.listener import ScenarioListener
from squashaat.models.booking_models import Booking, BookingSet
from squashaat.pages import (
    CourtAndTimeSlotChooserPage,
    CourtCancellationPage,
    CourtReservationPage,
    ErrorPage,
)
from squashaat.session import BrowserSession, get_session_manager
from squashaat.utils.time_formats import (
    format_start_time,
    parse_date_argument,
    parse_start_time,
)

logger = logging.getLogger(__name__)

CURRENT_DATE = "current"


@library(scope="GLOBAL", version="1.0.0", doc_format="ROBOT")
class BookingLibrary:
    """Keywords for acceptance testing the squash court booking site.

    Every keyword waits until the page it leaves the browser on is fully
    loaded. Booking pages are served from an eventually-consistent store;
    after a booking or cancellation the page is re-fetched until it shows
    the change.

    = Configuration =

    The library can be configured via import arguments, a YAML config
    file or environment variables (``SQUASH_WEBSITE_BASE_URL``,
    ``WEBDRIVER_TYPE``, ``WEBDRIVER_JAVASCRIPT_ENABLED``,
    ``WEBDRIVER_HEADLESS``):

    | *** Settings ***
    | Library    squashaat.lib.BookingLibrary
    | ...    base_url=%{SQUASH_WEBSITE_BASE_URL}
    | ...    driver_type=firefox
    | ...    headless=True

    Or using a config file:
    | Library    squashaat.lib.BookingLibrary    config=${CURDIR}/booking.yaml

    = Dates and times =

    Start times are given like ``10:15 AM``. Dates are given as
    ``yyyy-mm-dd``, ``today``, or ``current`` for the date currently shown.

    = Examples =

    | *** Test Cases ***
    | Book A Court
    |     Navigate To Squash Booking Page
    |     Book Court    2    10:15 AM
    |     Court Should Be Booked    2    10:15 AM    today
    |     Booked Court Count Should Be    1
    """

    ROBOT_LIBRARY_SCOPE = "GLOBAL"
    ROBOT_LIBRARY_VERSION = "1.0.0"

    def __init__(
        self,
        base_url: str = None,
        driver_type: str = None,
        javascript_enabled: bool = None,
        headless: bool = None,
        explicit_wait: str = None,
        load_retry_limit: int = None,
        retry_backoff: str = None,
        log_level: str = "INFO",
        config: str = None,
        **kwargs,
    ):
        """Initialize BookingLibrary.

        Args:
            base_url: URL of the booking site (supports %{ENV_VAR} syntax)
            driver_type: chrome, firefox, edge, safari or remote
            javascript_enabled: Whether the browser runs javascript
            headless: Run the browser without a window
            explicit_wait: Timeout for each page wait (RF time format)
            load_retry_limit: Maximum load attempts for consistency
            retry_backoff: Pause between re-fetches (RF time format)
            log_level: Logging verbosity
            config: Path to YAML config file (overrides other args)
            **kwargs: Further SuiteConfig fields
        """
        if config:
            self.config = SuiteConfig.from_yaml(config)
        else:
            given = dict(
                base_url=base_url,
                driver_type=driver_type,
                javascript_enabled=javascript_enabled,
                headless=headless,
                explicit_wait=explicit_wait,
                load_retry_limit=load_retry_limit,
                retry_backoff=retry_backoff,
                log_level=log_level,
                **kwargs,
            )
            # Import arguments win over the environment
            settings = SuiteConfig.env_kwargs()
            settings.update({k: v for k, v in given.items() if v is not None})
            self.config = SuiteConfig.from_kwargs(**settings)

        self.bookings = BookingSet()
        self._session: Optional[BrowserSession] = None

        self._listener = ScenarioListener(self, self.bookings)
        # Setting ROBOT_LIBRARY_LISTENER attribute enables RF to call listener methods
        self.ROBOT_LIBRARY_LISTENER = self._listener

        logging.getLogger("squashaat").setLevel(
            getattr(logging, self.config.log_level, logging.INFO)
        )

        rf_logger.info(
            f"BookingLibrary initialized for {self.config.base_url} "
            f"using {self.config.driver_type}"
        )

    # ==========================================================================
    # Session
    # ==========================================================================

    @property
    def active_session(self) -> Optional[BrowserSession]:
        """The browser session in use, or None if no browser was started yet."""
        return self._session

    @property
    def session(self) -> BrowserSession:
        """The browser session, started on first use."""
        if self._session is None:
            self._use_session(get_session_manager().acquire(self.config))
        return self._session

    @property
    def booking_page(self) -> CourtAndTimeSlotChooserPage:
        return CourtAndTimeSlotChooserPage(self.session)

    def _use_session(self, session: BrowserSession) -> None:
        session.subscribe(self._log_event)
        self._session = session

    def _log_event(self, event: object) -> None:
        rf_logger.debug(f"Page sync event: {event.to_dict()}")

    @keyword("Use SeleniumLibrary Browser")
    def use_seleniumlibrary_browser(self) -> None:
        """Drive the browser currently open in SeleniumLibrary.

        Use this instead of letting the library start its own browser, e.g.
        when the suite opens the browser with ``Open Browser``. Tokens and
        markers seen so far are not carried over.

        = Examples =
        | Open Browser    ${URL}    firefox
        | Use SeleniumLibrary Browser
        """
        selenium_library = BuiltIn().get_library_instance("SeleniumLibrary")
        self._use_session(
            get_session_manager().attach(selenium_library.driver, self.config)
        )
        rf_logger.info("BookingLibrary now uses the SeleniumLibrary browser")

    # ==========================================================================
    # Navigation
    # ==========================================================================

    @keyword("Navigate To Squash Booking Page")
    def navigate_to_squash_booking_page(self) -> None:
        """Open the booking page (unless it is shown already) and show today's bookings."""
        page = self.booking_page
        if not page.is_loaded():
            page.get()
        if page.current_date() != date.today():
            page.select_date(date.today())

    @keyword("View Bookings For Today")
    def view_bookings_for_today(self) -> None:
        self._view_bookings_for(date.today())

    @keyword("View Bookings For Date")
    def view_bookings_for_date(self, booking_date: str) -> None:
        """Show the bookings for ``booking_date`` (``yyyy-mm-dd`` or ``today``).

        = Examples =
        | View Bookings For Date    2016-01-05
        """
        self._view_bookings_for(self._parse_date(booking_date))

    @keyword("View Bookings For Earliest Date")
    def view_bookings_for_earliest_date(self) -> None:
        self._view_bookings_for(self.booking_page.booking_dates()[0])

    @keyword("View Bookings For Most Future Date")
    def view_bookings_for_most_future_date(self) -> None:
        self._view_bookings_for(self.booking_page.booking_dates()[-1])

    @keyword("View Bookings Days Ahead")
    def view_bookings_days_ahead(self, days: int) -> None:
        self._view_bookings_for(date.today() + timedelta(days=int(days)))

    @keyword("View Bookings Days Ago")
    def view_bookings_days_ago(self, days: int) -> None:
        self._view_bookings_for(date.today() - timedelta(days=int(days)))

    def _view_bookings_for(self, target: date) -> None:
        page = self._loaded_booking_page()
        if page.current_date() == target:
            return
        page.select_date(target)

    # ==========================================================================
    # Booking and cancelling
    # ==========================================================================

    @keyword("Book Court")
    def book_court(
        self,
        court: int,
        start_time: str,
        booking_date: str = "today",
        name: str = None,
        password: str = None,
    ) -> None:
        """Book ``court`` at ``start_time`` and wait until the booking is shown.

        | =Arguments= | =Description= |
        | court | Court number (1-5) |
        | start_time | Start time, e.g. ``10:15 AM`` |
        | booking_date | ``today`` (default), ``current`` or ``yyyy-mm-dd`` |
        | name | Players as ``A.Name/B.Name`` (default: library setting) |
        | password | Booking password (default: library setting) |

        = Examples =
        | Book Court    2    10:15 AM
        | Book Court    5    6:30 PM    current    name=J.Khan/R.Ashour
        """
        self._attempt_to_book(court, start_time, booking_date, name, password, True)

    @keyword("Attempt To Book Court")
    def attempt_to_book_court(
        self,
        court: int,
        start_time: str,
        booking_date: str = "today",
        name: str = None,
        password: str = None,
    ) -> None:
        """Submit a booking that is expected to be rejected.

        Leaves the browser on the error page, or on the reservation form
        when the browser itself flagged the details as invalid.

        = Examples =
        | Attempt To Book Court    2    10:15 AM    password=wrong
        """
        self._attempt_to_book(court, start_time, booking_date, name, password, False)

    @keyword("Cancel Court")
    def cancel_court(
        self,
        court: int,
        start_time: str,
        booking_date: str = "today",
        name: str = None,
        password: str = None,
    ) -> None:
        """Cancel the booking of ``court`` at ``start_time`` and wait until it is gone."""
        self._attempt_to_cancel(court, start_time, booking_date, name, password, True)

    @keyword("Attempt To Cancel Court")
    def attempt_to_cancel_court(
        self,
        court: int,
        start_time: str,
        booking_date: str = "today",
        name: str = None,
        password: str = None,
    ) -> None:
        """Submit a cancellation that is expected to be rejected."""
        self._attempt_to_cancel(court, start_time, booking_date, name, password, False)

    def cancel_booking(self, booking: Booking) -> None:
        """Cancel a booking made earlier in the test (used by the listener)."""
        page = self.booking_page
        if not page.is_loaded():
            page.get()
        page.cancel_court(
            booking.court,
            booking.time,
            booking.date,
            booking.name,
            self.config.default_password,
            True,
        )
        self.bookings.remove(booking)

    def _attempt_to_book(
        self,
        court,
        start_time: str,
        booking_date: str,
        name: Optional[str],
        password: Optional[str],
        expect_success: bool,
    ) -> None:
        court = int(court)
        start = parse_start_time(start_time)
        name = name or self.config.default_players
        password = password or self.config.default_password

        page = self._loaded_booking_page()
        self._check_court_and_time(page, court, start)
        target = self._resolve_date(page, booking_date)
        if page.current_date() != target:
            page = page.select_date(target)
        if page.is_court_booked_at(court, start):
            raise AssertionError(
                f"Court {court} is already booked at {format_start_time(start)}"
            )

        player1, _, player2 = name.partition("/")
        rf_logger.info(
            f"Booking court {court} at {format_start_time(start)} on {target} for {name}"
        )
        page.book_court(court, start, player1, player2, password, expect_success)

        # Remember the booking so it can be removed when the test ends
        if expect_success:
            self.bookings.add(Booking(court=court, time=start, date=target, name=name))

    def _attempt_to_cancel(
        self,
        court,
        start_time: str,
        booking_date: str,
        name: Optional[str],
        password: Optional[str],
        expect_success: bool,
    ) -> None:
        court = int(court)
        start = parse_start_time(start_time)
        name = name or self.config.default_players
        password = password or self.config.default_password

        page = self._loaded_booking_page()
        self._check_court_and_time(page, court, start)
        target = self._resolve_date(page, booking_date)
        if page.current_date() != target:
            page = page.select_date(target)
        if not page.is_court_booked_at(court, start):
            raise AssertionError(
                f"Court {court} is not booked at {format_start_time(start)}"
            )

        rf_logger.info(
            f"Cancelling court {court} at {format_start_time(start)} on {target} for {name}"
        )
        page.cancel_court(court, start, target, name, password, expect_success)

        if expect_success:
            self.bookings.remove(Booking(court=court, time=start, date=target, name=name))

    def _loaded_booking_page(self) -> CourtAndTimeSlotChooserPage:
        page = self.booking_page
        if not page.is_loaded():
            raise AssertionError("Expect bookings page to be loaded before calling this method")
        return page

    @staticmethod
    def _check_court_and_time(page: CourtAndTimeSlotChooserPage, court: int, start) -> None:
        if not page.is_court_number_valid(court):
            raise AssertionError(f"Court number is not valid: {court}")
        if not page.is_start_time_valid(start):
            raise AssertionError(f"Court start time is not valid: {format_start_time(start)}")

    def _resolve_date(self, page: CourtAndTimeSlotChooserPage, booking_date: str) -> date:
        if str(booking_date).strip().lower() == CURRENT_DATE:
            return page.current_date()
        return self._parse_date(booking_date)

    @staticmethod
    def _parse_date(value: str) -> date:
        if str(value).strip().lower() == "today":
            return date.today()
        return parse_date_argument(value)

    # ==========================================================================
    # Assertions
    # ==========================================================================

    @keyword("Court Should Be Booked")
    def court_should_be_booked(
        self, court: int, start_time: str, booking_date: str = CURRENT_DATE
    ) -> None:
        """Fail unless ``court`` is booked at ``start_time`` on ``booking_date``.

        = Examples =
        | Court Should Be Booked    2    10:15 AM
        | Court Should Be Booked    2    10:15 AM    today
        """
        start = parse_start_time(start_time)
        booked = self._booked_page_for(booking_date).is_court_booked_at(int(court), start)
        if not booked:
            raise AssertionError(
                f"Expected court time to be booked: court {court} at {format_start_time(start)}"
            )

    @keyword("Court Should Not Be Booked")
    def court_should_not_be_booked(
        self, court: int, start_time: str, booking_date: str = CURRENT_DATE
    ) -> None:
        start = parse_start_time(start_time)
        booked = self._booked_page_for(booking_date).is_court_booked_at(int(court), start)
        if booked:
            raise AssertionError(
                f"Expected court time to be unbooked: court {court} at {format_start_time(start)}"
            )

    def _booked_page_for(self, booking_date: str) -> CourtAndTimeSlotChooserPage:
        page = self.booking_page
        if not page.is_loaded():
            page.get()
        target = self._resolve_date(page, booking_date)
        if page.current_date() != target:
            page = page.select_date(target)
        return page

    @keyword("Booked Court Count Should Be")
    def booked_court_count_should_be(self, count: int) -> None:
        """Fail unless exactly ``count`` courts are booked today."""
        page = self.booking_page
        if page.current_date() != date.today():
            page = page.select_date(date.today())
        actual = page.booked_court_count()
        if actual != int(count):
            raise AssertionError(f"Expected {count} booked courts, got {actual} booked courts")

    @keyword("Court Start Times Should Be Every")
    def court_start_times_should_be_every(
        self, interval_minutes: int, first_time: str, last_time: str
    ) -> None:
        """Fail unless start times run from ``first_time`` to ``last_time`` at a fixed interval.

        = Examples =
        | Court Start Times Should Be Every    45    10:00 AM    9:15 PM
        """
        first = parse_start_time(first_time)
        last = parse_start_time(last_time)
        interval = timedelta(minutes=int(interval_minutes))

        start_times = self._loaded_booking_page().start_times()
        if not start_times:
            raise AssertionError("No court start times are shown")
        if start_times[0] != first:
            raise AssertionError(
                f"Expected first start time to be at {format_start_time(first)} "
                f"but got: {format_start_time(start_times[0])}"
            )
        anchor = date.today()
        for previous, current in zip(start_times, start_times[1:]):
            gap = _on(anchor, current) - _on(anchor, previous)
            if gap != interval:
                raise AssertionError(
                    f"Court start times should be {interval_minutes} minutes apart. "
                    f"Previous time: {format_start_time(previous)} "
                    f"Next time: {format_start_time(current)}"
                )
        if start_times[-1] != last:
            raise AssertionError(
                f"Expected last start time to be at {format_start_time(last)} "
                f"but got: {format_start_time(start_times[-1])}"
            )

    @keyword("Bookings Should Be Shown For Date")
    def bookings_should_be_shown_for_date(self, expected_date: str = "today") -> None:
        """Fail unless the booking page shows ``expected_date``."""
        self._assert_shown_date(self._parse_date(expected_date))

    @keyword("Bookings Should Be Shown For Days Ahead")
    def bookings_should_be_shown_for_days_ahead(self, days: int) -> None:
        self._assert_shown_date(date.today() + timedelta(days=int(days)))

    def _assert_shown_date(self, expected: date) -> None:
        actual = self.booking_page.current_date()
        if actual != expected:
            raise AssertionError(
                f"Expected displayed date to be {expected.isoformat()} but got: {actual.isoformat()}"
            )

    @keyword("Should Be On Squash Booking Page")
    def should_be_on_squash_booking_page(self) -> None:
        if not self.booking_page.is_loaded():
            raise AssertionError("Squash booking page should be fully loaded")

    @keyword("Should Be On Error Page")
    def should_be_on_error_page(self) -> None:
        """Fail unless the error page is shown.

        Passes without checking when ``error_page_redirects`` is set, as
        the browser is then taken straight back to the booking page.
        """
        if self.config.error_page_redirects:
            rf_logger.info("Error page redirects immediately; not checked")
            return
        if not ErrorPage(self.session).is_loaded():
            raise AssertionError("Squash error page should be fully loaded")

    @keyword("Booking Details Should Be Rejected")
    def booking_details_should_be_rejected(self) -> None:
        if not CourtReservationPage(self.session).has_invalid_input():
            raise AssertionError(
                "Expected to have received feedback that the booking details were invalid"
            )

    @keyword("Cancellation Details Should Be Rejected")
    def cancellation_details_should_be_rejected(self) -> None:
        if not CourtCancellationPage(self.session).has_invalid_input():
            raise AssertionError(
                "Expected to have received feedback that the cancellation details were invalid"
            )

    @keyword("Cancellation Details Should Not Be Rejected")
    def cancellation_details_should_not_be_rejected(self) -> None:
        if CourtCancellationPage(self.session).has_invalid_input():
            raise AssertionError(
                "Expected not to have received feedback that the cancellation details were invalid"
            )


def _on(day: date, moment: time) -> datetime:
    return datetime.combine(day, moment)
