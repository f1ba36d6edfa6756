# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterator, Mapping, Sequence
from typing import Protocol, runtime_checkable

type QueryValue = str | Sequence[str | None] | None
"""A single query parameter value.

Lists expand into repeated ``key=value`` pairs. ``None`` drops the parameter.
"""

type QueryParams = Mapping[str, QueryValue]

type Body = str | bytes | None
"""Request payload. Strings are hashed as UTF-8."""


class Field(Protocol):
    """A header name with one or more values.

    Names compare case-insensitively but keep the spelling they were given.
    """

    name: str
    values: list[str]

    def add(self, value: str) -> None: ...

    def set(self, values: list[str]) -> None: ...

    def as_string(self, delimiter: str = ",") -> str:
        """Values joined into the single line sent on the wire."""
        ...


class Fields(Protocol):
    """Case-insensitive mapping of header name to ``Field``."""

    # Keyed by lower-cased header name
    entries: OrderedDict[str, Field]

    def set_field(self, field: Field) -> None:
        """Store ``field`` under its own name, replacing any case variant."""
        ...

    def __setitem__(self, name: str, field: Field) -> None: ...

    def __getitem__(self, name: str) -> Field: ...

    def __delitem__(self, name: str) -> None: ...

    def __contains__(self, name: str) -> bool: ...

    def __iter__(self) -> Iterator[Field]: ...

    def __len__(self) -> int: ...

    def as_dict(self) -> dict[str, str]:
        """Header map keyed by each Field's original name."""
        ...


@runtime_checkable
class Request(Protocol):
    """Description of a single HTTP request to be signed."""

    method: str
    """HTTP verb, for example ``GET`` or ``POST``."""

    host: str
    """Target host, for example ``dns.baidubce.com``."""

    path: str | None
    """Path component of the request target."""

    query: QueryParams | None
    """Query parameters keyed by name."""

    fields: Fields
    """Request headers."""

    body: Body
    """Payload, only read by schemes that hash it."""
