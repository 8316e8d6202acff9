"""Error taxonomy shared by the backend and the client components.

Every error carries a ``message`` that is safe to show to the user.
"""


class TrackerError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    """Bad user input. Raised before any network call is made."""


class FetchError(TrackerError):
    """A read against the store failed."""


class WriteError(TrackerError):
    """An insert, update, upsert or delete against the store failed."""


class RecordNotFound(WriteError):
    """A scoped write matched no row for this owner."""


class UploadError(TrackerError):
    """A blob upload was rejected or failed."""


class AuthRequiredError(TrackerError):
    """An action needs a signed-in user and there is none."""


class AuthError(TrackerError):
    """Sign-in or sign-up was refused."""
