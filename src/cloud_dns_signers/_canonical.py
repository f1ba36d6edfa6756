# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Building blocks shared by every signing scheme.

Only the primitives live here. Each scheme assembles its own canonical request
from them, because the vendors disagree on trailing slashes, header allow-lists
and whether header values are encoded.
"""

import datetime
import hmac
from collections.abc import Collection, Iterable
from hashlib import sha256
from urllib.parse import quote

from .exceptions import InvalidSigningInputError, MissingExpectedParameterException
from .interfaces.http import Body, Fields, QueryParams, Request

ISO8601_TIMESTAMP_FORMAT: str = "%Y-%m-%dT%H:%M:%SZ"
COMPACT_TIMESTAMP_FORMAT: str = "%Y%m%dT%H%M%SZ"
EMPTY_SHA256_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def percent_encode(value: str) -> str:
    """Percent-encode a string per :rfc:`3986#section-2.3`.

    Only the unreserved set ``A-Z a-z 0-9 - _ . ~`` is left untouched, so
    ``!'()*`` are escaped too. Hex digits are upper case.
    """
    return quote(value, safe="")


def encode_path_segments(path: str) -> str:
    """Encode each ``/`` delimited segment of a path and join them back."""
    return "/".join(percent_encode(segment) for segment in path.split("/"))


def canonical_query(query: QueryParams | None, exclude: Collection[str] = ()) -> str:
    """Build a canonical query string.

    Multi-valued keys expand into one pair per value. Pairs are sorted by encoded
    key, then encoded value, and joined as ``key=value`` with ``&``.

    :param query: Query parameters. ``None`` values are dropped.
    :param exclude: Lower-case names to leave out, matched case-insensitively.
    """
    if not query:
        return ""

    pairs: list[tuple[str, str]] = []
    for key, value in query.items():
        if not key or key.lower() in exclude or value is None:
            continue
        for item in _expand_query_value(key, value):
            pairs.append((percent_encode(key), percent_encode(item)))
    # key-value pairs must be in sorted order for their encoded forms.
    return "&".join(f"{key}={value}" for key, value in sorted(pairs))


def _expand_query_value(key: str, value: object) -> Iterable[str]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list | tuple):
        items: list[str] = []
        for item in value:
            if item is None:
                items.append("")
            elif isinstance(item, str):
                items.append(item)
            else:
                raise InvalidSigningInputError(
                    f"Query parameter {key!r} contains a value of type "
                    f"{type(item).__name__}. Expected str."
                )
        return items
    raise InvalidSigningInputError(
        f"Query parameter {key!r} has a value of type {type(value).__name__}. "
        "Expected str or a list of str."
    )


def normalize_fields(fields: Fields) -> dict[str, str]:
    """Lower-case every header name and collapse whitespace in its value.

    ``Authorization`` is never part of the result. The mapping is sorted by name.
    """
    normalized = {
        field.name.lower(): " ".join(field.as_string().split())
        for field in fields
        if field.name.lower() != "authorization"
    }
    return dict(sorted(normalized.items()))


def sha256_hex(data: Body) -> str:
    if data is None:
        return EMPTY_SHA256_HASH
    if isinstance(data, str):
        data = data.encode("utf-8")
    return sha256(data).hexdigest()


def hmac_sha256(key: bytes | str, value: str) -> bytes:
    if isinstance(key, str):
        key = key.encode("utf-8")
    return hmac.new(key=key, msg=value.encode("utf-8"), digestmod=sha256).digest()


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def _as_utc(timestamp: datetime.datetime) -> datetime.datetime:
    # Naive values are taken to already be in UTC.
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=datetime.UTC)
    return timestamp.astimezone(datetime.UTC)


def iso8601_timestamp(timestamp: datetime.datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SSZ``, dropping sub-second precision."""
    return _as_utc(timestamp).strftime(ISO8601_TIMESTAMP_FORMAT)


def compact_timestamp(timestamp: datetime.datetime) -> str:
    """Format as ``YYYYMMDDTHHMMSSZ``, dropping sub-second precision."""
    return _as_utc(timestamp).strftime(COMPACT_TIMESTAMP_FORMAT)


def require_request_target(request: Request) -> None:
    """Fail fast when the request has no method or host to sign."""
    if not request.method:
        raise MissingExpectedParameterException(
            f"Cannot sign a request without an HTTP method. Current value: "
            f"{request.method!r}"
        )
    if not request.host:
        raise MissingExpectedParameterException(
            f"Cannot sign a request without a host. Current value: {request.host!r}"
        )
