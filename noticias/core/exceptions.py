"""
Exception classes for the public content and newsletter services.

Services raise these for lookup and validation failures; ``noticias.main``
maps them onto HTTP status codes. Persistence errors are not wrapped and
propagate unchanged.
"""


class NoticiasError(Exception):
    """Base exception for all application errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# =============================================================================
# Lookup Errors
# =============================================================================

class NotFoundError(NoticiasError):
    """Raised when a category, tag or author listing has no matching articles."""
    status_code = 404


class SubscriberNotFoundError(NoticiasError):
    """Raised when no subscriber owns the given unsubscribe token."""
    status_code = 404


# =============================================================================
# Validation Errors
# =============================================================================

class ExpiredOrInvalidTokenError(NoticiasError):
    """
    Raised when a confirmation token does not match a pending subscriber.

    Covers unknown, expired and already consumed tokens alike.
    """
    status_code = 400


class InvalidBulletinTypeError(NoticiasError):
    """Raised for a bulletin type outside morning/evening/weekly/sports."""
    status_code = 400


# =============================================================================
# Delivery Errors
# =============================================================================

class MailDeliveryError(NoticiasError):
    """Raised when the mail provider rejects or fails a send."""
    status_code = 502
