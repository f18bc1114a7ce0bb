# Centralized Prometheus metrics for the config engine. Cache traffic,
# config resolutions, degraded fallbacks, workflow actions and component
# lookups all get counters so dashboards can track tenant site health.

from prometheus_client import Counter, Gauge, Histogram

CACHE_HIT_TOTAL = Counter(
    "cache_hit_total",
    "Cache hits by cache name",
    ["cache"],
)
CACHE_MISS_TOTAL = Counter(
    "cache_miss_total",
    "Cache misses by cache name",
    ["cache"],
)
CACHE_SET_TOTAL = Counter(
    "cache_set_total",
    "Cache sets by cache name",
    ["cache"],
)
CACHE_PAYLOAD_BYTES = Histogram(
    "cache_payload_bytes",
    "Cached payload size in bytes",
    ["cache"],
    buckets=[100, 500, 1000, 5000, 10000, 50000, 100000, 500000, 1000000, 5000000],
)
CACHE_KEYS = Gauge(
    "cache_keys",
    "Number of keys held by the cache backend",
    ["backend"],
)

# One increment per resolve_config call. outcome: cached|resolved|fallback
CONFIG_RESOLUTIONS_TOTAL = Counter(
    "site_config_resolutions_total",
    "Site config resolutions by mode and outcome",
    ["mode", "outcome"],
)
# Why a tenant got the default config instead of its own.
CONFIG_FALLBACKS_TOTAL = Counter(
    "site_config_fallbacks_total",
    "Site config resolutions that degraded to defaults",
    ["reason"],
)
CUSTOMIZATION_ACTIONS_TOTAL = Counter(
    "customization_actions_total",
    "Draft/publish workflow actions by outcome",
    ["action", "outcome"],
)
# level: dealer|theme|base|fallback
COMPONENT_RESOLUTIONS_TOTAL = Counter(
    "component_resolutions_total",
    "Component resolutions by the precedence level that supplied them",
    ["level"],
)


def _label(value: object | None, default: str = "unknown") -> str:
    if value is None:
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return str(value)


def record_cache_hit(cache_name: str) -> None:
    CACHE_HIT_TOTAL.labels(cache=_label(cache_name, "default")).inc()


def record_cache_miss(cache_name: str) -> None:
    CACHE_MISS_TOTAL.labels(cache=_label(cache_name, "default")).inc()


def record_cache_set(cache_name: str, payload_bytes: int | None = None) -> None:
    CACHE_SET_TOTAL.labels(cache=_label(cache_name, "default")).inc()
    if payload_bytes is not None:
        CACHE_PAYLOAD_BYTES.labels(cache=_label(cache_name, "default")).observe(payload_bytes)


def record_cache_key_count(backend_name: str, count: int) -> None:
    CACHE_KEYS.labels(backend=_label(backend_name)).set(count)


def record_config_resolution(*, preview: bool, outcome: str) -> None:
    CONFIG_RESOLUTIONS_TOTAL.labels(
        mode="preview" if preview else "published",
        outcome=_label(outcome),
    ).inc()


def record_config_fallback(reason: str) -> None:
    CONFIG_FALLBACKS_TOTAL.labels(reason=_label(reason)).inc()


def record_customization_action(action: str, *, success: bool) -> None:
    CUSTOMIZATION_ACTIONS_TOTAL.labels(
        action=_label(action),
        outcome="success" if success else "failure",
    ).inc()


def record_component_resolution(level: str) -> None:
    COMPONENT_RESOLUTIONS_TOTAL.labels(level=_label(level)).inc()
