"""Booking-related data models."""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Iterator, List


@dataclass(frozen=True)
class Booking:
    """A court booking made by a test."""

    court: int
    time: time
    date: date
    name: str = "A.Shabana/J.Power"

    def describe(self) -> str:
        return f"court {self.court} at {self.time.strftime('%H:%M')} on {self.date.isoformat()} ({self.name})"


@dataclass
class BookingSet:
    """Bookings potentially made during the current test.

    The listener cancels whatever is left in the set when the test ends,
    so the next test starts with no bookings.
    """

    _bookings: List[Booking] = field(default_factory=list)

    def add(self, booking: Booking) -> None:
        if booking not in self._bookings:
            self._bookings.append(booking)

    def remove(self, booking: Booking) -> None:
        """Forget ``booking``; unknown bookings are ignored."""
        if booking in self._bookings:
            self._bookings.remove(booking)

    def clear(self) -> None:
        self._bookings.clear()

    def is_empty(self) -> bool:
        return not self._bookings

    def __contains__(self, booking: object) -> bool:
        return booking in self._bookings

    def __iter__(self) -> Iterator[Booking]:
        # Iterate over a copy so bookings can be removed while cancelling
        return iter(list(self._bookings))

    def __len__(self) -> int:
        return len(self._bookings)
