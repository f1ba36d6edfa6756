# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Iterator, Mapping
from copy import deepcopy

import cloud_dns_signers.interfaces.http as interfaces_http


class Field(interfaces_http.Field):
    """One request header, possibly carrying several values.

    The name keeps the caller's spelling so it is sent as given. Lookups in
    :py:class:`Fields` ignore case.
    """

    def __init__(self, *, name: str, values: Iterable[str] | None = None):
        self.name = name
        self.values: list[str] = [] if values is None else list(values)

    def add(self, value: str) -> None:
        self.values.append(value)

    def set(self, values: list[str]) -> None:
        self.values = values

    def as_string(self, delimiter: str = ",") -> str:
        """Render the values as a single header line.

        No values render as ``""`` and a lone value is returned as is. Several
        values are joined by ``delimiter``, quoting any value that holds a comma
        or a double quote.
        """
        match self.values:
            case []:
                return ""
            case [value]:
                return value
            case values:
                return delimiter.join(quote_and_escape_field_value(v) for v in values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return False
        return (self.name, self.values) == (other.name, other.values)

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, value={self.values!r})"


class Fields(interfaces_http.Fields):
    """Request headers keyed by lower-cased name.

    :param initial: ``Field`` objects to start with. Two fields whose names only
        differ by case are rejected with ``ValueError``.
    """

    def __init__(self, initial: Iterable[interfaces_http.Field] | None = None):
        self.entries: OrderedDict[str, interfaces_http.Field] = OrderedDict()
        duplicates: list[str] = []
        for field in initial or ():
            key = self._key(field.name)
            if key in self.entries and key not in duplicates:
                duplicates.append(key)
            self.entries[key] = field
        if duplicates:
            raise ValueError(
                "Header names must be unique regardless of case. Repeated "
                f"names: {', '.join(duplicates)}."
            )

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str | None] | None) -> Fields:
        """Build a collection from a plain header map.

        Entries whose value is ``None`` are dropped and the rest are coerced to
        ``str``.
        """
        if headers is None:
            return cls()
        return cls(
            Field(name=name, values=[str(value)])
            for name, value in headers.items()
            if value is not None
        )

    def set_field(self, field: interfaces_http.Field) -> None:
        """Add ``field``, replacing any header with the same name in any case."""
        self[field.name] = field

    def get(
        self, key: str, default: interfaces_http.Field | None = None
    ) -> interfaces_http.Field | None:
        return self.entries.get(self._key(key), default)

    def as_dict(self) -> dict[str, str]:
        """Header map keyed by each Field's original name, in insertion order."""
        return {field.name: field.as_string() for field in self.entries.values()}

    def _key(self, name: str) -> str:
        return name.lower()

    def __setitem__(self, name: str, field: interfaces_http.Field) -> None:
        if self._key(name) != self._key(field.name):
            raise ValueError(
                f"Cannot store Field {field.name!r} under the name {name!r}."
            )
        self.entries[self._key(name)] = field

    def __getitem__(self, name: str) -> interfaces_http.Field:
        return self.entries[self._key(name)]

    def __delitem__(self, name: str) -> None:
        del self.entries[self._key(name)]

    def __contains__(self, name: str) -> bool:
        return self._key(name) in self.entries

    def __iter__(self) -> Iterator[interfaces_http.Field]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other: object) -> bool:
        """Same fields in the same order."""
        if not isinstance(other, Fields):
            return False
        return self.entries == other.entries

    def __repr__(self) -> str:
        return f"Fields({list(self.entries.values())!r})"


class SigningRequest(interfaces_http.Request):
    """An HTTP request description handed to a signer.

    :param method: HTTP verb.
    :param host: Target host. Signers lower-case it before use.
    :param path: Path component; signers default it to ``/``.
    :param query: Query parameters. Lists expand to repeated pairs and ``None``
        values are dropped.
    :param fields: Request headers. A plain mapping is accepted and converted with
        :py:meth:`Fields.from_mapping`.
    :param body: Payload, hashed by schemes that sign it.
    """

    def __init__(
        self,
        *,
        method: str,
        host: str,
        path: str | None = None,
        query: interfaces_http.QueryParams | None = None,
        fields: Fields | Mapping[str, str | None] | None = None,
        body: interfaces_http.Body = None,
    ):
        self.method = method
        self.host = host
        self.path = path
        self.query = query
        if not isinstance(fields, Fields):
            fields = Fields.from_mapping(fields)
        self.fields = fields
        self.body = body

    def __deepcopy__(
        self, memo: dict[int, SigningRequest] | None = None
    ) -> SigningRequest:
        if memo is None:
            memo = {}
        if id(self) in memo:
            return memo[id(self)]

        # str and bytes bodies are immutable so they're shared with the copy
        copied = SigningRequest(
            method=self.method,
            host=self.host,
            path=self.path,
            query=deepcopy(self.query, memo),
            fields=deepcopy(self.fields, memo),
            body=self.body,
        )
        memo[id(self)] = copied
        return copied

    def __repr__(self) -> str:
        return (
            f"SigningRequest(method={self.method!r}, host={self.host!r}, "
            f"path={self.path!r}, query={self.query!r}, fields={self.fields!r})"
        )


def quote_and_escape_field_value(value: str) -> str:
    """Wrap ``value`` in double quotes when it holds a comma or a double quote.

    Backslashes and double quotes inside a quoted value are escaped with a
    backslash.
    """
    if "," not in value and '"' not in value:
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
