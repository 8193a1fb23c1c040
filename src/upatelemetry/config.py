"""Dashboard configuration for upatelemetry."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from upatelemetry import _constants as const
from upatelemetry.exceptions import UpaConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class TankItem:
    """One tracked tank sensor on the push feed.

    Parameters
    ----------
    external_id : str
        Upstream feed item name (e.g. ``"NODE3000005"``).
    display_id : str
        Short id used by the UI (e.g. ``"wsta"``).
    label : str
        Short display label.
    full_name : str
        Long display name.
    """

    external_id: str
    display_id: str
    label: str
    full_name: str

    def __post_init__(self) -> None:
        for field_name in ("external_id", "display_id", "label"):
            if not getattr(self, field_name).strip():
                raise UpaConfigError(f"TankItem.{field_name} must be non-empty")


DEFAULT_TANKS: tuple[TankItem, ...] = (
    TankItem(
        external_id="NODE3000005",
        display_id="wsta",
        label="WSTA",
        full_name="Waste Storage Tank Assembly",
    ),
)


@dataclasses.dataclass(frozen=True)
class FeedConfig:
    """Push feed subscription layout, validated once at startup."""

    server: str = const.FEED_SERVER
    adapter: str = const.FEED_ADAPTER
    items: tuple[TankItem, ...] = DEFAULT_TANKS
    data_fields: tuple[str, ...] = const.FEED_DATA_FIELDS
    signal_item: str | None = const.FEED_SIGNAL_ITEM
    signal_fields: tuple[str, ...] = const.FEED_SIGNAL_FIELDS

    def __post_init__(self) -> None:
        if not self.server.strip():
            raise UpaConfigError("feed server must be non-empty")
        if not self.adapter.strip():
            raise UpaConfigError("feed adapter must be non-empty")
        if not self.items:
            raise UpaConfigError("at least one tank item is required")

        external_ids = [item.external_id for item in self.items]
        if len(set(external_ids)) != len(external_ids):
            raise UpaConfigError(f"duplicate feed item ids: {external_ids}")
        display_ids = [item.display_id for item in self.items]
        if len(set(display_ids)) != len(display_ids):
            raise UpaConfigError(f"duplicate display ids: {display_ids}")

        for required in (const.VALUE_FIELD, const.TIMESTAMP_FIELD):
            if required not in self.data_fields:
                raise UpaConfigError(f"data_fields must include {required!r}")
        if self.signal_item and const.STATUS_CLASS_FIELD not in self.signal_fields:
            raise UpaConfigError(f"signal_fields must include {const.STATUS_CLASS_FIELD!r}")

    @property
    def source_label(self) -> str:
        return f"{self.server} / {self.adapter}"


@dataclasses.dataclass(frozen=True)
class DashboardConfig:
    """Dashboard configuration.

    Parameters
    ----------
    feed : FeedConfig
        Push feed server, adapter and tracked items.
    feed_enabled : bool
        Connect to the push feed on start.  Disable for offline use.
    position_primary_url, position_fallback_url : str
        ISS position sources; the fallback is only used when the primary fails.
    crew_url : str
        Open Notify astronaut list.
    news_url : str
        NASA station blog RSS feed.
    stats_url : str or None
        Optional JSON document with a ``stats`` mapping applied on top of
        ``stats``.  ``None`` keeps the defaults.
    stats : dict
        Default system summary values.
    request_timeout : float
        Per-request timeout in seconds for every REST/RSS call.
    position_interval, crew_interval, news_interval : float
        Poll periods in seconds.
    log_capacity : int
        Maximum retained event log entries.
    news_max_items, news_excerpt_chars : int
        NASA news limits.
    host, port
        JSON API bind address.
    """

    feed: FeedConfig = dataclasses.field(default_factory=FeedConfig)
    feed_enabled: bool = True
    position_primary_url: str = const.POSITION_PRIMARY_URL
    position_fallback_url: str = const.POSITION_FALLBACK_URL
    crew_url: str = const.CREW_URL
    news_url: str = const.NEWS_URL
    stats_url: str | None = None
    stats: dict[str, str] = dataclasses.field(default_factory=lambda: dict(const.DEFAULT_STATS))
    request_timeout: float = const.REQUEST_TIMEOUT
    position_interval: float = 5.0
    crew_interval: float = 300.0
    news_interval: float = 300.0
    log_capacity: int = const.LOG_CAPACITY
    news_max_items: int = const.NEWS_MAX_ITEMS
    news_excerpt_chars: int = const.NEWS_EXCERPT_CHARS
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise UpaConfigError("request_timeout must be positive")
        if self.log_capacity <= 0:
            raise UpaConfigError("log_capacity must be positive")
        if self.news_max_items <= 0 or self.news_excerpt_chars <= 0:
            raise UpaConfigError("news limits must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        """Create configuration from ``UPA_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        feed = overrides.pop("feed", None)
        if feed is None:
            feed_kwargs: dict[str, Any] = {}
            if env.get("UPA_FEED_SERVER"):
                feed_kwargs["server"] = env["UPA_FEED_SERVER"]
            if env.get("UPA_FEED_ADAPTER"):
                feed_kwargs["adapter"] = env["UPA_FEED_ADAPTER"]
            feed = FeedConfig(**feed_kwargs)
        config_kwargs["feed"] = feed

        _ENV_STR_MAP = {
            "UPA_HOST": "host",
            "UPA_STATS_URL": "stats_url",
            "UPA_CREW_URL": "crew_url",
            "UPA_NEWS_URL": "news_url",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "UPA_REQUEST_TIMEOUT": "request_timeout",
            "UPA_POSITION_INTERVAL": "position_interval",
            "UPA_CREW_INTERVAL": "crew_interval",
            "UPA_NEWS_INTERVAL": "news_interval",
        }
        try:
            for env_key, field_name in _ENV_FLOAT_MAP.items():
                val = env.get(env_key)
                if val is not None:
                    config_kwargs[field_name] = float(val)

            port_env = env.get("UPA_PORT")
            if port_env is not None:
                config_kwargs["port"] = int(port_env)
        except ValueError as exc:
            raise UpaConfigError(f"invalid numeric environment value: {exc}") from exc

        config_kwargs["feed_enabled"] = _env_bool(env.get("UPA_FEED_ENABLED"), True)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
