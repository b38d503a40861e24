"""Host settings storage protocol contract."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class SettingsSource(Protocol):
    """Protocol for the host's key/value settings storage.

    The host persists and surfaces the options in its admin UI; the bridge
    only reads them.
    """

    def get(self, key: str) -> Optional[str]:
        """Get the raw value stored for ``key``, or None when unset."""
        ...
