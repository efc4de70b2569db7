"""Keyed stores shared by every page object of one browser session.

Both stores track what the *browser* has shown, so they live as long as
the browser session does: across page object instances, navigations and
test cases. Neither store locks; only one test thread may drive a given
browser session at a time.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, Iterator, Optional, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class TokenStore(Protocol):
    """Protocol for the consistency token registry."""

    def update(self, key: str, token: str) -> None:
        ...

    def lookup(self, key: str) -> Optional[str]:
        ...


@runtime_checkable
class MarkerStore(Protocol):
    """Protocol for the stale element gate."""

    def capture(self, key: str, element: Any) -> None:
        ...

    def fetch(self, key: str) -> Optional[Any]:
        ...


class _KeyedStore(Generic[T]):
    def __init__(self) -> None:
        self._entries: Dict[str, T] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


class ConsistencyTokenRegistry(_KeyedStore[str]):
    """Last consistency token (page guid) observed per logical page key.

    The token is read from the rendered page; comparing a fresh token with
    the recorded one tells whether a store-backed page has changed since
    it was last seen.
    """

    def update(self, key: str, token: str) -> None:
        """Record ``token`` as the latest version seen for ``key``."""
        self._entries[key] = token

    def lookup(self, key: str) -> Optional[str]:
        """Return the recorded token, or None if ``key`` was never observed."""
        return self._entries.get(key)


class StaleElementGate(_KeyedStore[Any]):
    """Marker element per logical page key.

    A marker is an element that is guaranteed to be replaced whenever the
    page is redrawn or navigated away from. Waiting for it to go stale
    before waiting for the next page stops those waits being satisfied by
    look-alike elements still on the old page.
    """

    def capture(self, key: str, element: Any) -> None:
        """Store ``element`` as the marker of the page currently shown for ``key``."""
        self._entries[key] = element

    def fetch(self, key: str) -> Optional[Any]:
        """Return the marker for ``key``, or None if none was captured."""
        return self._entries.get(key)
