from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_DKIM_SELECTORS = ["default", "google", "k1", "s1", "s2", "selector1", "selector2", "dkim"]


class StoreMode(str, Enum):
    sqlite = "sqlite"
    memory = "memory"


class OutputFormat(str, Enum):
    json = "json"
    markdown = "markdown"


class ScanConfig(BaseModel):
    timeout_seconds: float = 5.0
    dkim_selectors: list[str] = Field(default_factory=lambda: list(DEFAULT_DKIM_SELECTORS))
    concurrent: bool = True


class MonitorConfig(BaseModel):
    interval_hours: float = 24.0
    store: StoreMode = StoreMode.sqlite
    store_path: str = "./output/monitor.db"
    scan: ScanConfig = Field(default_factory=ScanConfig)

    @property
    def interval_seconds(self) -> float:
        return self.interval_hours * 3600
