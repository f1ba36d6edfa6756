# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Identity(Protocol):
    """Credentials a signer can act on behalf of."""

    expiration: datetime | None = None
    """When the credentials stop being valid, in UTC. ``None`` never expires."""

    @property
    def is_expired(self) -> bool:
        if self.expiration is None:
            return False
        return self.expiration <= datetime.now(tz=UTC)


@runtime_checkable
class AccessKeyIdentity(Identity, Protocol):
    """A key pair issued by a cloud vendor.

    Vendors name the two halves differently (``AccessKey``, ``SecretId``,
    ``AccessKeySecret``). Every concrete credential type exposes the neutral
    ``key_id`` and ``secret`` views so signers and resolvers can treat them alike.
    """

    @property
    def key_id(self) -> str:
        """The public half of the key pair, sent in the credential scope."""
        ...

    @property
    def secret(self) -> str:
        """The private half of the key pair, used only for key derivation."""
        ...
