"""BookingLibrary - Robot Framework keywords for the squash booking site.

Keywords drive the site through page objects that only return once the
browser shows the intended, consistent page.
"""

from squashaat.lib.BookingLibrary import BookingLibrary

__all__ = ["BookingLibrary"]
