# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass, field
from datetime import datetime

from .interfaces.identity import AccessKeyIdentity


@dataclass(kw_only=True, frozen=True)
class BCECredentials(AccessKeyIdentity):
    """Baidu AI Cloud (BCE) access key pair."""

    access_key: str
    secret_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None

    @property
    def key_id(self) -> str:
        return self.access_key

    @property
    def secret(self) -> str:
        return self.secret_key


@dataclass(kw_only=True, frozen=True)
class TC3Credentials(AccessKeyIdentity):
    """Tencent Cloud API key pair, optionally with a temporary credential token."""

    secret_id: str
    secret_key: str = field(repr=False)
    token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None

    @property
    def key_id(self) -> str:
        return self.secret_id

    @property
    def secret(self) -> str:
        return self.secret_key


@dataclass(kw_only=True, frozen=True)
class VolcengineCredentials(AccessKeyIdentity):
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None

    @property
    def key_id(self) -> str:
        return self.access_key_id

    @property
    def secret(self) -> str:
        return self.secret_access_key


@dataclass(kw_only=True, frozen=True)
class JDCloudCredentials(AccessKeyIdentity):
    access_key_id: str
    access_key_secret: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None

    @property
    def key_id(self) -> str:
        return self.access_key_id

    @property
    def secret(self) -> str:
        return self.access_key_secret


@dataclass(kw_only=True, frozen=True)
class HuaweiCredentials(AccessKeyIdentity):
    access_key_id: str
    secret_access_key: str = field(repr=False)
    expiration: datetime | None = None

    @property
    def key_id(self) -> str:
        return self.access_key_id

    @property
    def secret(self) -> str:
        return self.secret_access_key
