"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0

Request model consumed by the signer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from urllib.parse import urlsplit

from .exceptions import MalformedRequestException

SIGV4_TIMESTAMP_FORMAT: str = "%Y%m%dT%H%M%SZ"
DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}


def parse_query(query: str | None) -> tuple[tuple[str, str], ...]:
    """Split a raw query string into ``(key, value)`` pairs in URI order.

    Pairs are split on ``&`` and then on the first ``=``; a pair without ``=`` gets
    an empty value. Empty segments, such as the one left by a trailing ``&``, are
    skipped. Keys and values are returned exactly as written: they are expected to
    already be URI-encoded the way AWS requires and are never decoded here.
    """
    if not query:
        return ()
    pairs: list[tuple[str, str]] = []
    for segment in query.split("&"):
        if not segment:
            continue
        key, _, value = segment.partition("=")
        pairs.append((key, value))
    return tuple(pairs)


def format_amz_date(when: datetime | None = None) -> str:
    """Format ``when`` (default: the current time) as an ``x-amz-date`` value.

    Naive datetimes are assumed to already be in UTC.
    """
    if when is None:
        when = datetime.now(UTC)
    elif when.tzinfo is not None:
        when = when.astimezone(UTC)
    return when.strftime(SIGV4_TIMESTAMP_FORMAT)


@dataclass(kw_only=True, frozen=True)
class SigningRequest:
    """The parts of an HTTP request that take part in a SigV4 signature.

    Only ``content-type``, ``host`` and ``x-amz-date`` are signed. Any other
    headers the real request carries are not covered by the signature.
    """

    method: str
    path: str
    host: str
    content_type: str
    amz_date: str
    query_pairs: tuple[tuple[str, str], ...] = ()
    body: bytes = field(default=b"", repr=False)

    def __post_init__(self) -> None:
        # Normalize any iterable of pairs so the request stays hashable.
        if not isinstance(self.query_pairs, tuple):
            object.__setattr__(self, "query_pairs", tuple(self.query_pairs))

    @classmethod
    def from_url(
        cls,
        *,
        method: str,
        url: str,
        content_type: str,
        amz_date: str,
        body: bytes = b"",
    ) -> SigningRequest:
        """Build a request from an absolute URL.

        The host is taken from the URL, with the port kept only when it isn't the
        scheme's default. An empty path is signed as ``/``.
        """
        parts = urlsplit(url)
        try:
            port = parts.port
        except ValueError as e:
            raise MalformedRequestException(f"Invalid port in URL {url!r}") from e
        if not parts.hostname:
            raise MalformedRequestException(f"URL {url!r} has no host to sign.")
        host = parts.hostname
        if ":" in host:
            host = f"[{host}]"
        if port is not None and DEFAULT_PORTS.get(parts.scheme) != port:
            host = f"{host}:{port}"
        return cls(
            method=method,
            path=parts.path or "/",
            query_pairs=parse_query(parts.query),
            host=host,
            content_type=content_type,
            amz_date=amz_date,
            body=body,
        )
