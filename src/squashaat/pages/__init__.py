"""Page objects for the squash booking site.

Every page takes the BrowserSession it runs in and is loaded with
``get()``, which returns only once the page is ready (and, for the
booking page, consistent with what the caller expects).
"""

from .base import BasePage
from .booking import (
    CourtAndTimeSlotChooserPage,
    CourtCancellationPage,
    CourtReservationPage,
    ErrorPage,
)

__all__ = [
    "BasePage",
    "CourtAndTimeSlotChooserPage",
    "CourtCancellationPage",
    "CourtReservationPage",
    "ErrorPage",
]
