"""User-facing notifications produced at client operation boundaries."""
from typing import Literal

from pydantic import BaseModel

from symptrack.core.errors import LocalStorageError, RemoteUnavailableError, TrackerError

Variant = Literal["default", "destructive"]


class Notification(BaseModel):
    title: str
    description: str
    variant: Variant = "default"


def saved_locally(name: str) -> Notification:
    return Notification(
        title="Symptom added (offline)",
        description=(
            f"'{name}' has been logged locally. It will be synced when you're online."
        ),
    )


def saved_remotely(name: str) -> Notification:
    return Notification(
        title="Symptom added",
        description=f"'{name}' has been logged successfully.",
    )


def could_not_save(action: str, error: Exception) -> Notification:
    """Failure notice naming the attempted action and where it failed."""
    if isinstance(error, LocalStorageError):
        reason = "Local storage is unavailable."
    elif isinstance(error, RemoteUnavailableError):
        reason = "The server could not be reached."
    elif isinstance(error, TrackerError):
        reason = error.message
    else:
        reason = str(error) or type(error).__name__
    return Notification(
        title=f"Could not {action}",
        description=f"{reason} Please try again.",
        variant="destructive",
    )


def could_not_load(view: str, error: Exception) -> Notification:
    return Notification(
        title=f"Could not load {view}",
        description=str(error) or type(error).__name__,
        variant="destructive",
    )


def sync_result(pushed: int, failed: int) -> Notification:
    if failed:
        return Notification(
            title="Sync incomplete",
            description=f"{pushed} symptom(s) synced, {failed} could not be sent.",
            variant="destructive",
        )
    if pushed:
        return Notification(
            title="Sync complete", description=f"{pushed} symptom(s) synced to the server."
        )
    return Notification(title="Up to date", description="There was nothing to sync.")


def data_cleared() -> Notification:
    return Notification(
        title="Data cleared",
        description="All locally stored data has been cleared successfully.",
    )


def settings_reset() -> Notification:
    return Notification(
        title="Settings reset",
        description="All settings have been reset to their default values.",
    )


def settings_saved() -> Notification:
    return Notification(
        title="Settings saved", description="Your preferences have been updated."
    )
