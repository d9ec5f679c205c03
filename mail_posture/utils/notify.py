from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Notifier:
    def dispatch(self, domain_id: str, record_type: str, old_value: str, new_value: str) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Writes change notifications to the log; real transports live outside this package."""

    def dispatch(self, domain_id: str, record_type: str, old_value: str, new_value: str) -> None:
        logger.warning(
            "dns record changed",
            extra={"domain_id": domain_id, "record_type": record_type, "old_value": old_value, "new_value": new_value},
        )
