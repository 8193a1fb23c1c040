"""upatelemetry - ISS Urine Processing Assembly telemetry dashboard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("upa-telemetry")
except PackageNotFoundError:
    __version__ = "0+local"
from upatelemetry.client import DashboardClient
from upatelemetry.config import DashboardConfig, FeedConfig, TankItem
from upatelemetry.exceptions import (
    UpaConfigError,
    UpaError,
    UpaFeedError,
    UpaSourceError,
    UpaTransportError,
)
from upatelemetry.ingestion.feed import FeedLifecycle, FeedSubscriptionManager
from upatelemetry.models import (
    Badge,
    Classification,
    ConnectionState,
    CrewManifest,
    LogEntry,
    LogSeverity,
    NewsDigest,
    PositionReading,
    TankState,
)
from upatelemetry.state.store import DashboardState

__all__ = [
    "__version__",
    "Badge",
    "Classification",
    "ConnectionState",
    "CrewManifest",
    "DashboardClient",
    "DashboardConfig",
    "DashboardState",
    "FeedConfig",
    "FeedLifecycle",
    "FeedSubscriptionManager",
    "LogEntry",
    "LogSeverity",
    "NewsDigest",
    "PositionReading",
    "TankItem",
    "TankState",
    "UpaConfigError",
    "UpaError",
    "UpaFeedError",
    "UpaSourceError",
    "UpaTransportError",
]
