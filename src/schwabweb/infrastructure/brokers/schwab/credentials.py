"""CredentialBundle - Session credentials harvested from the browser"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

# Headers httpx manages itself or cannot send (HTTP/2 pseudo headers are
# filtered separately by their leading colon).
_TRANSPORT_HEADERS = frozenset({"host", "content-length", "accept-encoding"})


@dataclass
class CredentialBundle:
    """Bearer token, replayable header set and cookie string

    Owned by a single client. The login flow replaces it wholesale and the
    token refresher only touches the bearer token; once populated,
    ``headers["Authorization"]`` always equals ``bearer_token``.

    Not safe for concurrent mutation: callers sharing a client across tasks
    must serialize trades and refreshes themselves.
    """

    bearer_token: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    cookie_string: str = ""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.bearer_token and self.cookie_string)

    def replace(self, other: "CredentialBundle") -> None:
        """Replace every field with those of ``other``"""
        self.bearer_token = other.bearer_token
        self.headers = dict(other.headers)
        self.cookie_string = other.cookie_string

    def update_bearer_token(self, bearer_token: str) -> None:
        """Set the bearer token and its Authorization header together"""
        self.bearer_token = bearer_token
        self.headers["Authorization"] = bearer_token

    def get_header(self, name: str) -> str | None:
        """Case-insensitive header lookup"""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def request_headers(
        self, extra: Mapping[str, str] | None = None
    ) -> dict[str, str]:
        """Fresh header dict for one request; the bundle is not modified

        Each extra header replaces every captured header of the same name,
        whatever its case.
        """
        headers = dict(self.headers)
        for name, value in (extra or {}).items():
            lowered = name.lower()
            for key in [k for k in headers if k.lower() == lowered]:
                del headers[key]
            headers[name] = value
        return headers


def join_session_cookies(
    cookie_batches: Iterable[Iterable[Mapping[str, str]]],
) -> str:
    """Merge cookies from several domains into one Cookie header value

    Cookies are deduplicated by name with the last one processed winning,
    so a name never appears twice in the result.

    Args:
        cookie_batches: One iterable of ``{"name", "value"}`` mappings per domain

    Returns:
        ``name=value`` pairs joined by ``"; "``
    """
    by_name: dict[str, str] = {}
    for batch in cookie_batches:
        for cookie in batch:
            name = cookie.get("name")
            if not name:
                continue
            by_name.pop(name, None)
            by_name[name] = cookie.get("value", "")
    return "; ".join(f"{name}={value}" for name, value in by_name.items())


def build_credential_bundle(
    captured_headers: Mapping[str, str], cookie_string: str
) -> CredentialBundle:
    """Assemble the bundle from an intercepted request's headers

    The captured headers are kept so that browser-only values (channel
    code, client ids) are replayed as-is. Authorization and Cookie are then
    set from the captured bearer and the aggregated cookie string.
    """
    bearer_token = ""
    headers: dict[str, str] = {}
    for key, value in captured_headers.items():
        lowered = key.lower()
        if lowered == "authorization":
            bearer_token = value
            continue
        if lowered == "cookie" or key.startswith(":"):
            continue
        if lowered in _TRANSPORT_HEADERS:
            continue
        headers[key] = value

    headers["Authorization"] = bearer_token
    headers["Cookie"] = cookie_string
    return CredentialBundle(
        bearer_token=bearer_token, headers=headers, cookie_string=cookie_string
    )
