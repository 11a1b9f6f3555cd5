"""Notifier adapter abstraction: pluggable delivery of fulfillment notices."""

from fulfillment import config

_notifier_instance = None


def get_notifier():
    """Return the configured notifier adapter (singleton).

    Uses the email notifier over the in-memory mail transport by default.
    Select the adapter with the NOTIFIER_ADAPTER environment variable.
    """
    global _notifier_instance
    if _notifier_instance is None:
        if config.NOTIFIER_ADAPTER == "email":
            from fulfillment.notifier.email_notifier import EmailNotifier

            _notifier_instance = EmailNotifier()
        else:
            raise ValueError(f"Unknown notifier adapter: {config.NOTIFIER_ADAPTER}")
    return _notifier_instance


def reset_notifier():
    """Reset the notifier singleton (useful for testing)."""
    global _notifier_instance
    _notifier_instance = None
