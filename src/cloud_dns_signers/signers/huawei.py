# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Huawei Cloud ``SDK-HMAC-SHA256`` request signing.

Used by Huawei Cloud DNS at ``dns.myhuaweicloud.com``. Unlike the other schemes
there is no credential scope and no key derivation: the secret key signs the
string to sign directly.
"""

import datetime
import logging
from copy import deepcopy
from dataclasses import dataclass
from hashlib import sha256
from typing import Final, TypedDict

from .._canonical import (
    canonical_query,
    compact_timestamp,
    encode_path_segments,
    hmac_sha256,
    normalize_fields,
    require_request_target,
    sha256_hex,
    utc_now,
)
from .._http import Field, SigningRequest
from .._identity import HuaweiCredentials

logger: Final = logging.getLogger(__name__)

DEFAULT_HOST: Final = "dns.myhuaweicloud.com"
ALGORITHM: Final = "SDK-HMAC-SHA256"
DATE_HEADER: Final = "X-Sdk-Date"
SIGNED_HEADER_PREFIX: Final = "x-sdk-"
ALWAYS_SIGNED_HEADERS: Final = ("host", "x-sdk-date", "content-type")


class HuaweiSigningProperties(TypedDict, total=False):
    timestamp: datetime.datetime


@dataclass(frozen=True, kw_only=True)
class HuaweiAuthorization:
    authorization: str
    sdk_date: str
    """Value for the ``X-Sdk-Date`` header."""

    signed_headers: tuple[str, ...]


class HuaweiSigner:
    """Request signer for Huawei Cloud's ``SDK-HMAC-SHA256`` scheme."""

    def sign(
        self,
        *,
        signing_properties: HuaweiSigningProperties,
        http_request: SigningRequest,
        identity: HuaweiCredentials,
    ) -> SigningRequest:
        new_request, result = self._authorize(
            signing_properties=signing_properties,
            http_request=http_request,
            identity=identity,
        )
        new_request.fields.set_field(
            Field(name="Authorization", values=[result.authorization])
        )
        return new_request

    def generate_authorization(
        self,
        *,
        signing_properties: HuaweiSigningProperties,
        http_request: SigningRequest,
        identity: HuaweiCredentials,
    ) -> HuaweiAuthorization:
        _, result = self._authorize(
            signing_properties=signing_properties,
            http_request=http_request,
            identity=identity,
        )
        return result

    def _authorize(
        self,
        *,
        signing_properties: HuaweiSigningProperties,
        http_request: SigningRequest,
        identity: HuaweiCredentials,
    ) -> tuple[SigningRequest, HuaweiAuthorization]:
        self._validate_identity(identity=identity)
        require_request_target(http_request)
        timestamp = signing_properties.get("timestamp") or utc_now()
        sdk_date = compact_timestamp(timestamp)

        new_request = deepcopy(http_request)
        new_request.host = new_request.host.lower()
        new_request.fields.set_field(Field(name="Host", values=[new_request.host]))
        new_request.fields.set_field(Field(name=DATE_HEADER, values=[sdk_date]))

        canonical_request = self.canonical_request(request=new_request)
        string_to_sign = self.string_to_sign(
            canonical_request=canonical_request, sdk_date=sdk_date
        )
        signature = hmac_sha256(
            key=identity.secret_access_key, value=string_to_sign
        ).hex()

        signed_headers = tuple(self._normalize_signing_fields(request=new_request))
        authorization = (
            f"{ALGORITHM} Access={identity.access_key_id}, "
            f"SignedHeaders={';'.join(signed_headers)}, Signature={signature}"
        )
        return new_request, HuaweiAuthorization(
            authorization=authorization,
            sdk_date=sdk_date,
            signed_headers=signed_headers,
        )

    def canonical_request(self, *, request: SigningRequest) -> str:
        """Build the canonical request.

        The layout matches the other SHA-256 schemes: method, URI with a trailing
        slash, query, header lines, signed header list and payload hash.
        """
        normalized_fields = self._normalize_signing_fields(request=request)
        canonical_fields = "".join(
            f"{name}:{value}\n" for name, value in normalized_fields.items()
        )
        canonical_request = (
            f"{request.method.upper()}\n"
            f"{self._format_canonical_path(path=request.path)}\n"
            f"{canonical_query(request.query)}\n"
            f"{canonical_fields}\n"
            f"{';'.join(normalized_fields)}\n"
            f"{sha256_hex(request.body)}"
        )
        logger.debug("Huawei canonical request:\n%s", canonical_request)
        return canonical_request

    def string_to_sign(self, *, canonical_request: str, sdk_date: str) -> str:
        string_to_sign = (
            f"{ALGORITHM}\n"
            f"{sdk_date}\n"
            f"{sha256(canonical_request.encode()).hexdigest()}"
        )
        logger.debug("Huawei string to sign:\n%s", string_to_sign)
        return string_to_sign

    def _normalize_signing_fields(self, *, request: SigningRequest) -> dict[str, str]:
        return {
            name: value
            for name, value in normalize_fields(request.fields).items()
            if name in ALWAYS_SIGNED_HEADERS or name.startswith(SIGNED_HEADER_PREFIX)
        }

    def _format_canonical_path(self, *, path: str | None) -> str:
        if not path:
            path = "/"
        if not path.startswith("/"):
            path = f"/{path}"
        if not path.endswith("/"):
            path = f"{path}/"
        return encode_path_segments(path)

    def _validate_identity(self, *, identity: HuaweiCredentials) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, HuaweiCredentials):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"HuaweiCredentials but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )
