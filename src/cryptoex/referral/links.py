"""Referral link building and parsing."""

from urllib.parse import parse_qs, quote, urlencode, urljoin, urlsplit, urlunsplit

_WEB_SCHEMES = ("http", "https")


def _has_origin(url: str | None) -> bool:
    if not url or url == "null":
        return False
    parts = urlsplit(url)
    return parts.scheme in _WEB_SCHEMES and bool(parts.netloc)


def build_ref_link(
    code: str,
    base_url: str | None = None,
    page: str = "index.html",
    param: str = "ref",
) -> str:
    """Build a shareable link carrying a referral code.

    Args:
        code: Referral code
        base_url: URL of the page the link is built from
        page: Landing page, resolved against ``base_url``
        param: Query parameter name

    Returns:
        Absolute link when ``base_url`` has a web origin, a relative
        ``page?ref=CODE`` link otherwise, and "" for an empty code
    """
    code = (code or "").strip()
    if not code:
        return ""

    if not _has_origin(base_url):
        return f"{page}?{param}={quote(code, safe='')}"

    target = urlsplit(urljoin(base_url, f"./{page}"))
    return urlunsplit(
        (target.scheme, target.netloc, target.path, urlencode({param: code}), "")
    )


def extract_ref_code(url: str, param: str = "ref") -> str | None:
    """Return the referral code from a page URL's query string, if any."""
    values = parse_qs(urlsplit(url or "").query).get(param)
    if not values:
        return None
    code = values[0].strip()
    return code or None


def extract_path(url: str) -> str:
    return urlsplit(url or "").path
