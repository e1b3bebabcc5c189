"""Error taxonomy shared by the client data layer.

Server routes raise FastAPI ``HTTPException`` directly; these classes cover
the client side, where local storage failures must stay distinguishable from
remote store failures.
"""


class TrackerError(Exception):
    """Base class for all client data-layer errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LocalStorageError(TrackerError):
    """Local cache read/write failure (quota, corrupt backing store, bad value)."""


class RemoteStoreError(TrackerError):
    """Remote store request failed: 5xx, unexpected status or bad payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteValidationError(RemoteStoreError):
    """The remote store rejected the payload (HTTP 400)."""


class RemoteNotFoundError(RemoteStoreError):
    """The referenced identifier does not exist on the remote store (HTTP 404)."""


class RemoteUnavailableError(RemoteStoreError):
    """The remote store could not be reached at all."""
