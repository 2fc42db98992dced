"""Click metrics extraction from request headers and query parameters."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from linktracker.schemas.analytics import ClickMetrics

UTM_PREFIX = "utm_"

# UTM parameters captured into the click event
UTM_FIELDS = ("source", "medium", "campaign", "term", "content", "purpose")

# Country codes the edge uses for "unknown" and Tor exits
UNKNOWN_COUNTRY_CODES = frozenset({"XX", "T1"})


@dataclass(frozen=True)
class GeoHints:
    """Geographic location supplied by the upstream edge proxy."""

    country: str | None = None  # ISO 3166-1 alpha-2 country code
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "GeoHints":
        """Read Cloudflare visitor location headers, ignoring unusable values."""
        lowered = _lower_keys(headers)
        country = _clean(lowered.get("cf-ipcountry"))
        if country and country.upper() in UNKNOWN_COUNTRY_CODES:
            country = None
        return cls(
            country=country,
            city=_clean(lowered.get("cf-ipcity")),
            latitude=_parse_coordinate(lowered.get("cf-iplatitude"), 90.0),
            longitude=_parse_coordinate(lowered.get("cf-iplongitude"), 180.0),
        )


def _lower_keys(headers: Mapping[str, str]) -> dict[str, str]:
    return {key.lower(): value for key, value in headers.items()}


def _clean(value: str | None) -> str | None:
    """Strip a header value, mapping blanks to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_coordinate(value: str | None, limit: float) -> float | None:
    value = _clean(value)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not -limit <= number <= limit:
        return None
    return number


def is_utm_param(name: str) -> bool:
    """Whether a query parameter is a campaign-tracking parameter."""
    return name.startswith(UTM_PREFIX)


def get_client_ip(headers: Mapping[str, str], client_host: str | None = None) -> str | None:
    """Extract client IP address from request headers.

    Handles CF-Connecting-IP and X-Forwarded-For for requests behind
    proxies/load balancers, falling back to the direct peer address.
    """
    lowered = _lower_keys(headers)

    connecting_ip = _clean(lowered.get("cf-connecting-ip"))
    if connecting_ip:
        return connecting_ip

    forwarded_for = lowered.get("x-forwarded-for")
    if forwarded_for:
        # client, proxy1, proxy2 - the first one is the original client
        first = _clean(forwarded_for.split(",")[0])
        if first:
            return first

    real_ip = _clean(lowered.get("x-real-ip"))
    if real_ip:
        return real_ip

    return client_host


def extract_utm_params(query_items: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Collect known UTM parameters, keeping the first non-empty value of each."""
    utm: dict[str, str] = {}
    for name, value in query_items:
        if not is_utm_param(name):
            continue
        field = name[len(UTM_PREFIX):]
        if field in UTM_FIELDS and name not in utm and value:
            utm[name] = value
    return utm


def extract_click_metrics(
    headers: Mapping[str, str],
    query_items: Iterable[tuple[str, str]],
    geo: GeoHints | None = None,
    client_host: str | None = None,
) -> ClickMetrics:
    """Build the click event payload for one redirect.

    Pure function of its inputs: no network or storage access, and missing
    headers or hints simply leave the matching fields unset.
    """
    lowered = _lower_keys(headers)
    geo = geo or GeoHints()

    return ClickMetrics(
        ip=get_client_ip(lowered, client_host),
        user_agent=_clean(lowered.get("user-agent")),
        referer=_clean(lowered.get("referer")),
        country=geo.country,
        city=geo.city,
        latitude=geo.latitude,
        longitude=geo.longitude,
        **extract_utm_params(query_items),
    )
