"""Browser Driver Protocol - Anti-Corruption Layer.

Page objects and the page readiness resolver talk to the browser only
through this protocol, so that:
1. Selenium specifics (waits, exception types) stay in one adapter
2. Unit tests can drive pages with a recording fake driver
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Protocol, runtime_checkable

# A wait condition receives the underlying driver and returns a truthy value
# once satisfied (Selenium expected_conditions fit this shape).
WaitCondition = Callable[[Any], Any]


@runtime_checkable
class BrowserDriver(Protocol):
    """Capabilities the acceptance-test layer consumes from a browser driver."""

    def navigate(self, url: str) -> None:
        """Load ``url`` in the current window."""
        ...

    def current_url(self) -> str:
        """Return the URL currently shown."""
        ...

    def title(self) -> str:
        """Return the current document title."""
        ...

    def wait_until_stale(self, element: Any, timeout: float) -> None:
        """Block until ``element`` is no longer attached to the document.

        Raises:
            PageLoadTimeoutError: If the element is still attached after
                ``timeout`` seconds.
        """
        ...

    def wait_until(
        self,
        condition: WaitCondition,
        timeout: float,
        description: str = "condition",
    ) -> Any:
        """Block until ``condition`` holds and return its value.

        Raises:
            PageLoadTimeoutError: If the condition does not hold within
                ``timeout`` seconds.
        """
        ...

    def find_element(self, by: str, value: str) -> Any:
        """Return the first matching element (raises if none)."""
        ...

    def find_elements(self, by: str, value: str) -> List[Any]:
        """Return all matching elements (possibly empty)."""
        ...

    def take_screenshot(self) -> Optional[bytes]:
        """Return a PNG screenshot, or None if the driver cannot take one."""
        ...

    def delete_all_cookies(self) -> None:
        ...

    def quit(self) -> None:
        ...
