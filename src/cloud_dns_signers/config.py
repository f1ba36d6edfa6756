# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
import os
from typing import ClassVar, Final

from ._identity import (
    BCECredentials,
    HuaweiCredentials,
    JDCloudCredentials,
    TC3Credentials,
    VolcengineCredentials,
)
from .exceptions import CredentialsNotFoundError
from .interfaces.identity import AccessKeyIdentity

logger: Final = logging.getLogger(__name__)


class EnvironmentCredentialsResolver[I: AccessKeyIdentity]:
    """Resolves vendor credentials from system environment variables.

    The first successful lookup is cached for the lifetime of the resolver.
    """

    key_id_env_var: ClassVar[str]
    secret_env_var: ClassVar[str]
    session_token_env_var: ClassVar[str | None] = None

    def __init__(self) -> None:
        self._credentials: I | None = None

    def get_identity(self) -> I:
        if self._credentials is not None:
            return self._credentials

        logger.debug(
            "Attempting to resolve credentials from %s and %s.",
            self.key_id_env_var,
            self.secret_env_var,
        )
        key_id = os.getenv(self.key_id_env_var)
        secret = os.getenv(self.secret_env_var)
        session_token = (
            os.getenv(self.session_token_env_var)
            if self.session_token_env_var is not None
            else None
        )

        if key_id is None or secret is None:
            raise CredentialsNotFoundError(
                f"{self.key_id_env_var} and {self.secret_env_var} are required"
            )

        self._credentials = self._build(
            key_id=key_id, secret=secret, session_token=session_token
        )
        return self._credentials

    def _build(self, *, key_id: str, secret: str, session_token: str | None) -> I:
        raise NotImplementedError


class BCEEnvironmentCredentialsResolver(
    EnvironmentCredentialsResolver[BCECredentials]
):
    key_id_env_var = "BAIDU_ACCESS_KEY"
    secret_env_var = "BAIDU_SECRET_KEY"
    session_token_env_var = "BAIDU_SESSION_TOKEN"

    def _build(
        self, *, key_id: str, secret: str, session_token: str | None
    ) -> BCECredentials:
        return BCECredentials(
            access_key=key_id, secret_key=secret, session_token=session_token
        )


class TC3EnvironmentCredentialsResolver(
    EnvironmentCredentialsResolver[TC3Credentials]
):
    key_id_env_var = "TENCENTCLOUD_SECRET_ID"
    secret_env_var = "TENCENTCLOUD_SECRET_KEY"
    session_token_env_var = "TENCENTCLOUD_SESSION_TOKEN"

    def _build(
        self, *, key_id: str, secret: str, session_token: str | None
    ) -> TC3Credentials:
        return TC3Credentials(secret_id=key_id, secret_key=secret, token=session_token)


class VolcengineEnvironmentCredentialsResolver(
    EnvironmentCredentialsResolver[VolcengineCredentials]
):
    key_id_env_var = "VOLCENGINE_ACCESS_KEY_ID"
    secret_env_var = "VOLCENGINE_SECRET_ACCESS_KEY"
    session_token_env_var = "VOLCENGINE_SESSION_TOKEN"

    def _build(
        self, *, key_id: str, secret: str, session_token: str | None
    ) -> VolcengineCredentials:
        return VolcengineCredentials(
            access_key_id=key_id,
            secret_access_key=secret,
            session_token=session_token,
        )


class JDCloudEnvironmentCredentialsResolver(
    EnvironmentCredentialsResolver[JDCloudCredentials]
):
    key_id_env_var = "JDCLOUD_ACCESS_KEY_ID"
    secret_env_var = "JDCLOUD_ACCESS_KEY_SECRET"
    session_token_env_var = "JDCLOUD_SESSION_TOKEN"

    def _build(
        self, *, key_id: str, secret: str, session_token: str | None
    ) -> JDCloudCredentials:
        return JDCloudCredentials(
            access_key_id=key_id,
            access_key_secret=secret,
            session_token=session_token,
        )


class HuaweiEnvironmentCredentialsResolver(
    EnvironmentCredentialsResolver[HuaweiCredentials]
):
    key_id_env_var = "HUAWEICLOUD_ACCESS_KEY_ID"
    secret_env_var = "HUAWEICLOUD_SECRET_ACCESS_KEY"

    def _build(
        self, *, key_id: str, secret: str, session_token: str | None
    ) -> HuaweiCredentials:
        return HuaweiCredentials(access_key_id=key_id, secret_access_key=secret)
