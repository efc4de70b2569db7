"""Recording fake browser driver for unit tests.

FakeDriver implements the BrowserDriver protocol without a browser. Every
navigation and wait is appended to ``calls`` so tests can assert on the
order of effects. Elements are registered per locator with ``place``.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from selenium.common.exceptions import NoSuchElementException


class FakeElement:
    """Minimal stand-in for a Selenium WebElement."""

    def __init__(
        self,
        text: str = "",
        attributes: Optional[Dict[str, str]] = None,
        displayed: bool = True,
        on_click: Optional[Callable[[], None]] = None,
        name: str = "element",
    ):
        self.text = text
        self.attributes = attributes or {}
        self.displayed = displayed
        self.on_click = on_click
        self.name = name
        self.clicks = 0
        self.typed: List[str] = []

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def is_displayed(self) -> bool:
        return self.displayed

    def click(self) -> None:
        self.clicks += 1
        if self.on_click is not None:
            self.on_click()

    def send_keys(self, *values: str) -> None:
        self.typed.append("".join(values))

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"


class FakeDriver:
    """BrowserDriver that records calls instead of driving a browser."""

    def __init__(self, current_url: str = "about:blank", title: str = ""):
        self.calls: List[Tuple[Any, ...]] = []
        self.url = current_url
        self.page_title = title
        self.elements: Dict[Tuple[str, str], List[Any]] = {}
        self.screenshot: Optional[bytes] = b"\x89PNG"
        self.cookies_deleted = 0
        self.quit_count = 0

    def place(self, locator: Tuple[str, str], *elements: Any) -> None:
        """Make ``elements`` the result of looking up ``locator``."""
        self.elements[locator] = list(elements)

    # BrowserDriver protocol

    def navigate(self, url: str) -> None:
        self.calls.append(("navigate", url))
        self.url = url

    def current_url(self) -> str:
        return self.url

    def title(self) -> str:
        return self.page_title

    def wait_until_stale(self, element: Any, timeout: float) -> None:
        self.calls.append(("wait_until_stale", element))

    def wait_until(self, condition: Any, timeout: float, description: str = "condition") -> Any:
        self.calls.append(("wait_until", description))
        return True

    def find_element(self, by: str, value: str) -> Any:
        found = self.elements.get((by, value))
        if not found:
            raise NoSuchElementException(f"No element for {by}={value}")
        return found[0]

    def find_elements(self, by: str, value: str) -> List[Any]:
        return list(self.elements.get((by, value), []))

    def take_screenshot(self) -> Optional[bytes]:
        return self.screenshot

    def delete_all_cookies(self) -> None:
        self.cookies_deleted += 1

    def quit(self) -> None:
        self.quit_count += 1

    # Helpers for assertions

    def call_names(self) -> List[Any]:
        return [call[0] for call in self.calls]

    def navigations(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == "navigate"]


class ScriptedPage:
    """Page whose consistency verdicts are scripted, for resolver tests."""

    def __init__(
        self,
        driver: FakeDriver,
        url: Optional[str] = "http://squash.example/",
        key: str = "ScriptedPage",
        verdicts: Optional[List[bool]] = None,
        markers: Optional[List[Any]] = None,
    ):
        self.driver = driver
        self.url = url
        self.key = key
        self.verdicts = list(verdicts or [])
        self.markers = list(markers or [])
        self.consistency_checks: List[bool] = []

    def logical_key(self) -> str:
        return self.key

    def canonical_url(self) -> Optional[str]:
        return self.url

    def await_ready(self) -> None:
        self.driver.calls.append(("await_ready",))

    def capture_marker(self) -> Optional[Any]:
        marker = self.markers.pop(0) if self.markers else None
        self.driver.calls.append(("capture_marker", marker))
        return marker

    def is_consistent(self, expect_changed: bool) -> bool:
        self.consistency_checks.append(expect_changed)
        self.driver.calls.append(("is_consistent", expect_changed))
        return self.verdicts.pop(0) if self.verdicts else False


def court_button(court: int, slot: int, **kwargs: Any) -> FakeElement:
    """A reservation or cancellation button for ``court`` in time slot ``slot``."""
    return FakeElement(
        attributes={"data-court": str(court), "data-time_slot": str(slot)},
        name=f"court{court}-slot{slot}",
        **kwargs,
    )


def place_booking_site(driver: FakeDriver, start_times=("10:00 AM", "10:45 AM", "11:30 AM")) -> None:
    """Lay out a booking page plus working reservation and cancellation forms.

    Submitting the reservation form books the court of the last clicked
    reservation button; submitting the cancellation form frees it. Each
    submission changes the page guid.
    """
    from squashaat.pages import (
        CourtAndTimeSlotChooserPage as Page,
        CourtCancellationPage as Cancellation,
        CourtReservationPage as Reservation,
    )

    state = {"guid": 1, "clicked": None, "booked": []}

    def refresh() -> None:
        driver.place(Page.PAGE_GUID, FakeElement(attributes={"innerHTML": f"guid-{state['guid']}"}))
        driver.place(
            Page.CANCELLATION_BUTTON,
            *[court_button(court, slot, on_click=remember(court, slot)) for court, slot in state["booked"]],
        )

    def remember(court: int, slot: int) -> Callable[[], None]:
        return lambda: state.update(clicked=(court, slot))

    def book() -> None:
        state["booked"].append(state["clicked"])
        state["guid"] += 1
        refresh()

    def cancel() -> None:
        state["booked"].remove(state["clicked"])
        state["guid"] += 1
        refresh()

    labels = [FakeElement(text, name=f"label {text}") for text in start_times]
    driver.place(Page.BOOKING_TABLE, FakeElement(name="table"))
    driver.place(Page.DATE_DROPDOWN, FakeElement(name="dropdown"))
    driver.place(Page.TIME_LABEL, *labels)
    driver.place(
        Page.RESERVATION_BUTTON,
        *[
            court_button(court, slot, on_click=remember(court, slot))
            for court in range(1, 6)
            for slot in range(1, len(start_times) + 1)
        ],
    )
    driver.place(Reservation.RESERVATION_FORM, FakeElement(name="reservation form"))
    driver.place(Reservation.PLAYER1_NAME, FakeElement(name="player1"))
    driver.place(Reservation.PLAYER2_NAME, FakeElement(name="player2"))
    driver.place(Reservation.PASSWORD, FakeElement(name="password"))
    driver.place(Reservation.SUBMIT, FakeElement(name="reserve", on_click=book))
    driver.place(Cancellation.CANCELLATION_FORM, FakeElement(name="cancellation form"))
    driver.place(Cancellation.NAME, FakeElement(name="name"))
    driver.place(Cancellation.PASSWORD, FakeElement(name="password"))
    driver.place(Cancellation.SUBMIT, FakeElement(name="cancel", on_click=cancel))
    refresh()
