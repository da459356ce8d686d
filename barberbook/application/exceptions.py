class ValidationFailure(ValueError):
    """Raised when a wizard transition is missing a required value or gets an unknown one."""
    pass


class WizardBusy(RuntimeError):
    """Raised when a transition is attempted while a reservation write is in flight."""
    pass


class WriteFailure(RuntimeError):
    """Raised when the store is unreachable or rejects a reservation write."""
    pass


class ProfileNotFound(LookupError):
    """Raised when a provider has no stored public profile."""
    pass


class NotificationFailure(RuntimeError):
    """Raised by notifiers when webhook delivery fails. Never escapes the notifier use case."""
    pass


class SessionNotFound(LookupError):
    pass
