"""Error hierarchy for flavor synchronization.

Every error carries a machine-readable ``code``, a short ``title`` and a
user-facing ``message`` suitable for a single notice, plus the HTTP status the
presentation API answers with. Synchronizer operations hand these back inside
an ``Outcome``; the session gate and API routes raise them.
"""

from typing import Optional


class FlavorSyncError(Exception):
    """Base exception for all flavor-sync failures."""

    code = "flavor_sync_error"
    title = "Error"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "title": self.title,
                "message": self.message,
            }
        }


# --- Validation ---------------------------------------------------------------

class ValidationError(FlavorSyncError):
    """Candidate name rejected locally; never touches the network."""

    code = "validation_error"
    http_status = 400


class EmptyName(ValidationError):
    code = "empty_name"
    title = "Empty Flavor"

    def __init__(self):
        super().__init__("Please enter a flavor name.")


class NameTooLong(ValidationError):
    code = "name_too_long"
    title = "Name Too Long"

    def __init__(self, max_length: int):
        super().__init__(f"Flavor names must be {max_length} characters or less.")
        self.max_length = max_length


class DuplicateName(ValidationError):
    code = "duplicate_name"
    title = "Duplicate Flavor"
    http_status = 409

    def __init__(self, name: str):
        super().__init__(f'"{name}" is already in your list!')
        self.name = name


# --- Remote store -------------------------------------------------------------

class RemoteStoreError(FlavorSyncError):
    """The remote store refused the call or could not be reached."""

    code = "remote_store_error"
    http_status = 502
    action = "contacting the flavor store"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        if message is None:
            if status_code is not None:
                message = f"Failed {self.action} (HTTP {status_code})"
            else:
                message = f"Network error while {self.action}"
        super().__init__(message)
        self.status_code = status_code


class FetchError(RemoteStoreError):
    code = "fetch_failed"
    action = "loading flavors"


class CreateError(RemoteStoreError):
    code = "create_failed"
    action = "adding flavor"


class DeleteError(RemoteStoreError):
    code = "delete_failed"
    action = "deleting flavor"


# --- Concurrency --------------------------------------------------------------

class BusyError(FlavorSyncError):
    """An overlapping call was rejected; safe to ignore silently."""

    code = "busy"
    title = "Busy"
    http_status = 409

    def __init__(self, operation: str):
        super().__init__(f"Another {operation} is already in progress")
        self.operation = operation


# --- Session ------------------------------------------------------------------

class AuthenticationError(FlavorSyncError):
    code = "authentication_error"
    title = "Sign In Error"
    http_status = 400


class MissingCredentials(AuthenticationError):
    code = "missing_credentials"

    def __init__(self, message: str = "Please enter both email and password"):
        super().__init__(message)


class PasswordTooShort(AuthenticationError):
    code = "password_too_short"

    def __init__(self, min_length: int):
        super().__init__(f"Password must be at least {min_length} characters")
        self.min_length = min_length


class PasswordMismatch(AuthenticationError):
    code = "password_mismatch"
    title = "Sign Up Error"

    def __init__(self):
        super().__init__("Passwords do not match")


class NotSignedIn(AuthenticationError):
    code = "not_signed_in"
    http_status = 401

    def __init__(self):
        super().__init__("Sign in to manage your flavors")
