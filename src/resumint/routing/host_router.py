"""Rewrite portfolio subdomains to path-based routes.

``acme.localhost/`` is served from ``/portfolio/acme``; ``www`` and the bare
base domain are left alone. Pure and stateless.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

logger = logging.getLogger(__name__)

DEFAULT_BASE_DOMAINS: tuple[str, ...] = ("localhost", "resumint-xi.vercel.app")
DEFAULT_PORTFOLIO_PREFIX = "/portfolio"

_PASSTHROUGH_PREFIXES = ("/api/", "/_next/", "/static/", "/favicon.ico")


@dataclass(frozen=True)
class RouteResult:
    path: str
    query: str = ""
    rewritten: bool = False
    subdomain: str | None = None

    @property
    def url(self) -> str:
        """Path plus query string, as the rewritten request target."""
        return urlunsplit(("", "", self.path, self.query, ""))


def extract_subdomain(
    host: str, base_domains: tuple[str, ...] = DEFAULT_BASE_DOMAINS
) -> str | None:
    """Return the portfolio label of ``<label>.<base-domain>`` or None."""
    hostname = host.split(":", 1)[0].strip().lower().rstrip(".")
    for base in base_domains:
        suffix = "." + base.lower()
        if not hostname.endswith(suffix):
            continue
        label = hostname[: -len(suffix)]
        if not label or "." in label or label == "www":
            return None
        if label == base.split(".", 1)[0].lower():
            return None
        return label
    return None


def suggest_subdomain(title: str) -> str:
    """Turn a resume title into a portfolio label, e.g. "SWE Resume!" -> "swe-resume"."""
    label = re.sub(r"[^a-z0-9\s-]", "", title.lower())
    label = re.sub(r"\s+", "-", label)
    label = re.sub(r"-+", "-", label)
    return label.strip("-")


def _is_passthrough_path(path: str) -> bool:
    if path.startswith(_PASSTHROUGH_PREFIXES):
        return True
    # static assets such as /logo.png
    return "." in path.rsplit("/", 1)[-1] and not path.endswith("/")


def rewrite(
    host: str,
    path: str,
    query: str = "",
    *,
    base_domains: tuple[str, ...] = DEFAULT_BASE_DOMAINS,
    portfolio_prefix: str = DEFAULT_PORTFOLIO_PREFIX,
) -> RouteResult:
    """Map a request's host and path to the internal route that serves it."""
    path = path or "/"
    if _is_passthrough_path(path):
        return RouteResult(path=path, query=query)

    subdomain = extract_subdomain(host, base_domains)
    if subdomain is None:
        return RouteResult(path=path, query=query)

    prefix = portfolio_prefix.rstrip("/")
    if path.startswith(prefix + "/"):
        return RouteResult(path=path, query=query, subdomain=subdomain)

    if path == "/password":
        target = f"{prefix}/{subdomain}/password"
    elif path == "/":
        target = f"{prefix}/{subdomain}"
    else:
        target = f"{prefix}/{subdomain}{path}"
    logger.debug("Rewriting %s%s -> %s", host, path, target)
    return RouteResult(path=target, query=query, rewritten=True, subdomain=subdomain)


def rewrite_url(url: str, **kwargs) -> RouteResult:
    """Convenience wrapper taking a full URL."""
    parts = urlsplit(url)
    return rewrite(parts.netloc, parts.path, parts.query, **kwargs)
