"""Robot Framework listener that keeps each test independent of the others.

Implements ROBOT_LISTENER_API_VERSION = 3. Bookings made by a test are
cancelled when the test ends, so every test starts with no bookings.
"""

import base64
import logging
from typing import TYPE_CHECKING, List, Optional

from robot.api import logger as rf_logger

from squashaat.models.booking_models import Booking, BookingSet

if TYPE_CHECKING:
    from squashaat.lib.BookingLibrary import BookingLibrary

logger = logging.getLogger(__name__)


class ScenarioListener:
    """Test start/end hooks of the booking library.

    At test start the booking set is cleared and cookies are deleted. At
    test end a screenshot is embedded if the test failed, then every
    booking left in the set is cancelled; if any cancellation fails the
    test is failed once, after all of them were tried.

    Attributes:
        ROBOT_LISTENER_API_VERSION: Listener API version (3)
    """

    ROBOT_LISTENER_API_VERSION = 3

    def __init__(self, library: "BookingLibrary", bookings: Optional[BookingSet] = None):
        """Initialize the listener.

        Args:
            library: The library whose browser session and bookings are managed.
            bookings: Booking set to clean up. Defaults to the library's.
        """
        self.library = library
        self.bookings = bookings if bookings is not None else library.bookings
        self._current_test: Optional[str] = None

    def start_test(self, data, result):
        """Called when a test case starts.

        Args:
            data: Test data object
            result: Test result object
        """
        self._current_test = data.name
        logger.debug(f"Test started: {self._current_test}")
        self.bookings.clear()

        session = self.library.active_session
        if session is not None and session.config.delete_cookies:
            session.delete_all_cookies()

    def end_test(self, data, result):
        """Called when a test case ends.

        Args:
            data: Test data object
            result: Test result object
        """
        if not result.passed:
            self._embed_screenshot()

        failed = self._cancel_leftover_bookings()
        if failed:
            message = "Error cancelling bookings in test teardown: " + ", ".join(
                booking.describe() for booking in failed
            )
            rf_logger.error(message)
            result.status = "FAIL"
            result.message = f"{result.message}\n\n{message}" if result.message else message

        logger.debug(f"Test ended: {self._current_test}")
        self._current_test = None

    def _embed_screenshot(self) -> None:
        session = self.library.active_session
        if session is None:
            return
        png = session.screenshot()
        if png is None:
            return
        encoded = base64.b64encode(png).decode("ascii")
        rf_logger.info(
            f'<img src="data:image/png;base64,{encoded}" width="800px">', html=True
        )

    def _cancel_leftover_bookings(self) -> List[Booking]:
        failed: List[Booking] = []
        for booking in self.bookings:
            try:
                self.library.cancel_booking(booking)
            except Exception as e:
                # Keep cancelling the rest
                logger.error(f"Failed to cancel {booking.describe()}: {e}")
                failed.append(booking)
        return failed
