"""Domain errors raised by the service layer and mapped to HTTP by the routers."""


class TrackerError(Exception):
    """Base class for expected, per-request failures."""


class ValidationError(TrackerError, ValueError):
    """Missing or malformed input fields."""


class AuthError(TrackerError):
    """Bad credentials or an unusable session token."""


class NotFoundError(TrackerError, LookupError):
    """Target record does not exist or is not owned by the caller."""


class ConflictError(TrackerError):
    """Unique field already taken."""
