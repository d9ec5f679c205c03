from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from ..models.config import MonitorConfig
from ..utils.dns import Resolver
from ..utils.notify import Notifier
from ..utils.store import ScanStore


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MonitorContext:
    config: MonitorConfig
    resolver: Resolver
    store: ScanStore
    notifier: Notifier
    clock: Callable[[], datetime] = field(default=utcnow)
