from __future__ import annotations

import logging
import time
from typing import List, Protocol

import dns.resolver

from .ledger import QueryLedger

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    def resolve_txt(self, name: str) -> List[str]: ...

    def resolve_mx(self, name: str) -> List[str]: ...


def _txt_value(rdata) -> str:
    # TXT rdata may be split into several character-strings; receivers read them concatenated
    strings = getattr(rdata, "strings", None)
    if strings:
        return "".join(s.decode("utf-8", errors="replace") for s in strings)
    return rdata.to_text().strip('"')


def _mx_value(rdata) -> str:
    return f"{rdata.preference} {rdata.exchange.to_text(omit_final_dot=True)}"


class DnsClient:
    """Fail-soft DNS lookups: any resolution error yields an empty list."""

    def __init__(self, timeout_seconds: float = 5.0, ledger: QueryLedger | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self.ledger = ledger

    def resolve_txt(self, name: str) -> List[str]:
        return self._resolve(name, "TXT", _txt_value)

    def resolve_mx(self, name: str) -> List[str]:
        return self._resolve(name, "MX", _mx_value)

    def _resolve(self, name: str, record_type: str, render) -> List[str]:
        start = time.monotonic()
        error: str | None = None
        values: list[str] = []
        try:
            answers = dns.resolver.resolve(name, record_type, lifetime=self.timeout_seconds)
            values = [render(r) for r in answers]
            return values
        except Exception as exc:
            error = f"{type(exc).__name__}: {exc}"
            logger.debug("dns lookup failed", extra={"query_name": name, "type": record_type, "error": error})
            return []
        finally:
            if self.ledger:
                self.ledger.add(
                    query_name=name,
                    record_type=record_type,
                    status="ok" if error is None else "error",
                    answers=len(values),
                    error=error,
                    duration_ms=int((time.monotonic() - start) * 1000),
                )
