import logging


class PrivacyFilter(logging.Filter):
    """Mask credentials passed to loggers through ``extra``."""

    BLOCKED_KEYS = {"password", "password_hash", "access_token", "refresh_token", "authorization"}

    def filter(self, record: logging.LogRecord) -> bool:
        for key in self.BLOCKED_KEYS:
            if hasattr(record, key):
                setattr(record, key, "[REDACTED]")
        return True


def _install(filterer: logging.Filterer, privacy: PrivacyFilter) -> None:
    if not any(isinstance(existing, PrivacyFilter) for existing in filterer.filters):
        filterer.addFilter(privacy)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    privacy = PrivacyFilter()
    root = logging.getLogger()
    _install(root, privacy)
    # Records from child loggers skip root's own filters, only handler filters apply.
    for handler in root.handlers:
        _install(handler, privacy)
