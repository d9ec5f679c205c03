from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import List

import typer

from .models.config import MonitorConfig, OutputFormat, ScanConfig, StoreMode
from .models.results import MonitoredDomain
from .modules.scoring import calculate_score, score_badge
from .modules.template_lint import lint_template
from .pipeline.context import MonitorContext
from .pipeline.monitor import MonitorError, MonitoringLoop
from .pipeline.scanner import scan as run_scan
from .reporting.markdown import build_summary
from .utils.dns import DnsClient
from .utils.ledger import QueryLedger
from .utils.normalize import is_valid_domain, normalize_domain
from .utils.notify import LoggingNotifier
from .utils.store import build_store

app = typer.Typer(add_completion=False)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "time": datetime.now(timezone.utc).isoformat(),
        }
        for key in ("domain", "domain_id", "record_type", "reason", "severity", "score", "error"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload, default=str)


def setup_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, handlers=[handler])


def _checked_domain(raw: str) -> str:
    domain = normalize_domain(raw)
    if not is_valid_domain(domain):
        typer.echo(f"invalid domain: {raw}", err=True)
        raise typer.Exit(1)
    return domain


@app.command()
def scan(
    domain: str = typer.Option(..., "--domain"),
    timeout: float = typer.Option(5.0, "--timeout", help="Per-query DNS lifetime in seconds."),
    output: OutputFormat = typer.Option(OutputFormat.json, "--format"),
    sequential: bool = typer.Option(False, "--sequential", help="Resolve record families one after another."),
    verbose: bool = typer.Option(False, "--verbose"),
) -> None:
    """Scan a domain's SPF, DKIM, DMARC, BIMI and MX records."""
    setup_logging(verbose)
    name = _checked_domain(domain)
    config = ScanConfig(timeout_seconds=timeout, concurrent=not sequential)
    ledger = QueryLedger()
    result = run_scan(name, DnsClient(timeout_seconds=timeout, ledger=ledger), config)
    score = calculate_score(result)

    if output == OutputFormat.markdown:
        typer.echo(build_summary(result, score))
        return
    payload = {
        "scan": result.model_dump(mode="json"),
        "score": score.model_dump(mode="json"),
        "badge": score_badge(score.score),
        "dns_queries": ledger.totals(),
    }
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def monitor(
    domains: List[str] = typer.Option(..., "--domain", help="Domain to monitor; repeat for more."),
    store: StoreMode = typer.Option(StoreMode.sqlite, "--store"),
    store_path: str = typer.Option("./output/monitor.db", "--store-path"),
    interval_hours: float = typer.Option(24.0, "--interval-hours"),
    timeout: float = typer.Option(5.0, "--timeout"),
    once: bool = typer.Option(False, "--once", help="Run a single cycle and exit."),
) -> None:
    """Re-scan domains on a fixed cadence and log alerts for record changes."""
    setup_logging()
    names = [_checked_domain(d) for d in domains]
    config = MonitorConfig(
        interval_hours=interval_hours,
        store=store,
        store_path=store_path,
        scan=ScanConfig(timeout_seconds=timeout),
    )
    context = MonitorContext(
        config=config,
        resolver=DnsClient(timeout_seconds=timeout),
        store=build_store(config.store.value, config.store_path),
        notifier=LoggingNotifier(),
    )
    monitored = [MonitoredDomain(id=name, name=name, owner_id="cli") for name in names]
    loop = MonitoringLoop(context)
    try:
        reports = loop.run_forever(lambda: monitored, max_cycles=1 if once else None)
    except MonitorError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2)
    except KeyboardInterrupt:
        loop.stop()
        raise typer.Exit(130)
    typer.echo(json.dumps([r.model_dump(mode="json") for r in reports], indent=2))


@app.command()
def lint(
    subject: str = typer.Option(..., "--subject"),
    body: str = typer.Option("", "--body"),
    html: str = typer.Option("", "--html"),
) -> None:
    """Lint an email template for spam-filter triggers."""
    result = lint_template(subject, body, html)
    typer.echo(json.dumps(result.model_dump(), indent=2))
