"""Public base URL resolution.

The retrieval URL is baked into the QR code at upload time, so the base URL
must be the one clients can actually reach. Three strategies exist and one is
picked at startup by ``get_url_strategy()``:

* static: ``DOCDROP_PUBLIC_URL`` is set; always use it.
* forwarded: ``DOCDROP_TRUST_PROXY_HEADERS`` is on; take scheme and host from
  ``X-Forwarded-Proto`` / ``X-Forwarded-Host``, falling back to the connection.
* local: ``http://localhost:<port>``, for development.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import quote

from docdrop.settings import settings

logger = logging.getLogger(__name__)

DOWNLOAD_PATH = "/download"


class UrlStrategyKind(str, Enum):
    STATIC = "static"
    FORWARDED = "forwarded"
    LOCAL = "local"


@dataclass(frozen=True)
class RequestContext:
    scheme: str
    host: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str:
        """First value of a possibly comma-joined header, or empty string."""
        value = self.headers.get(name.lower()) or self.headers.get(name) or ""
        return value.split(",")[0].strip()


class UrlStrategy(ABC):
    kind: UrlStrategyKind

    @abstractmethod
    def resolve(self, context: RequestContext) -> str:
        """Return the base URL (no trailing slash) for this request."""
        ...


class StaticUrlStrategy(UrlStrategy):
    kind = UrlStrategyKind.STATIC

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def resolve(self, context: RequestContext) -> str:
        return self.base_url


class ForwardedUrlStrategy(UrlStrategy):
    kind = UrlStrategyKind.FORWARDED

    def resolve(self, context: RequestContext) -> str:
        scheme = context.header("x-forwarded-proto").lower() or context.scheme
        host = context.header("x-forwarded-host") or context.host
        return f"{scheme}://{host}"


class LocalUrlStrategy(UrlStrategy):
    kind = UrlStrategyKind.LOCAL

    def __init__(self, port: int) -> None:
        self.port = port

    def resolve(self, context: RequestContext) -> str:
        return f"http://localhost:{self.port}"


def get_url_strategy() -> UrlStrategy:
    if settings.public_url:
        logger.info("URL strategy: static %s", settings.public_url)
        return StaticUrlStrategy(settings.public_url)
    if settings.trust_proxy_headers:
        logger.info("URL strategy: forwarded headers")
        return ForwardedUrlStrategy()
    logger.info("URL strategy: localhost port=%d", settings.port)
    return LocalUrlStrategy(settings.port)


def build_retrieval_url(base_url: str, key: str) -> str:
    return f"{base_url.rstrip('/')}{DOWNLOAD_PATH}/{quote(key, safe='')}"
