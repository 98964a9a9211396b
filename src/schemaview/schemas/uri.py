"""URI helpers for schema identifiers.

Schema URIs are handled as plain strings; these helpers give them a
canonical form so registry lookups compare equal.
"""

from urllib.parse import urljoin, urlsplit, urlunsplit

_DEFAULT_PORTS = {"http": "80", "https": "443"}


def _remove_dot_segments(path: str) -> str:
    """Collapse `.` and `..` segments (RFC 3986 section 5.2.4)."""
    if "." not in path:
        return path
    output: list[str] = []
    segments = path.split("/")
    for segment in segments:
        if segment == ".":
            continue
        if segment == "..":
            if len(output) > 1:
                output.pop()
            continue
        output.append(segment)
    if segments[-1] in (".", ".."):
        output.append("")
    return "/".join(output)


def normalize_uri(uri: str | None) -> str | None:
    """Return the canonical form of *uri*, or None when *uri* is None.

    Lowercases scheme and host, drops default ports and empty fragments,
    removes dot segments and gives authority-based URIs a root path.
    """
    if uri is None:
        return None
    parts = urlsplit(str(uri))
    scheme = parts.scheme.lower()
    netloc = parts.netloc
    if netloc:
        userinfo, _, hostport = netloc.rpartition("@")
        host, sep, port = hostport.partition(":")
        if sep and _DEFAULT_PORTS.get(scheme) == port:
            sep, port = "", ""
        netloc = (userinfo + "@" if userinfo else "") + host.lower() + sep + port
    path = _remove_dot_segments(parts.path)
    if netloc and not path:
        path = "/"
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def resolve_uri(base: str | None, reference: str) -> str:
    """Resolve *reference* against *base* and normalize the result."""
    if base is None:
        return normalize_uri(reference)
    return normalize_uri(urljoin(base, reference))
