# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Volcengine ``HMAC-SHA256`` request signing.

Used by the Volcengine DNS API at ``open.volcengineapi.com``.
"""

import datetime
import logging
from copy import deepcopy
from dataclasses import dataclass
from hashlib import sha256
from typing import Final, Required, TypedDict

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
from .._identity import VolcengineCredentials
from ..exceptions import MissingExpectedParameterException

logger: Final = logging.getLogger(__name__)

DEFAULT_HOST: Final = "open.volcengineapi.com"
DEFAULT_SERVICE: Final = "DNS"
DEFAULT_REGION: Final = "cn-north-1"
ALGORITHM: Final = "HMAC-SHA256"
DATE_HEADER: Final = "X-Date"
CONTENT_SHA256_HEADER: Final = "X-Content-Sha256"
SECURITY_TOKEN_HEADER: Final = "X-Security-Token"


class VolcengineSigningProperties(TypedDict, total=False):
    region: Required[str]
    service: Required[str]
    timestamp: datetime.datetime


@dataclass(frozen=True, kw_only=True)
class VolcengineAuthorization:
    authorization: str
    x_date: str
    """Value for the ``X-Date`` header."""

    hashed_payload: str
    """Hex SHA-256 of the body, the value for ``X-Content-Sha256`` when sent."""

    signed_headers: tuple[str, ...]


class VolcengineSigner:
    """Request signer for Volcengine's ``HMAC-SHA256`` scheme.

    Every header on the request is signed. The canonical URI always ends in a
    slash.
    """

    def sign(
        self,
        *,
        signing_properties: VolcengineSigningProperties,
        http_request: SigningRequest,
        identity: VolcengineCredentials,
    ) -> SigningRequest:
        """Generate and apply a signature to a copy of the supplied request.

        ``X-Content-Sha256`` is only sent when the supplied request already has a
        header with that name. Its value is replaced by the payload hash.

        :param signing_properties: VolcengineSigningProperties to define the target
            service, region, and timestamp.
        :param http_request: A SigningRequest to sign prior to sending to the API.
        :param identity: The Volcengine access key pair.
        """
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
        signing_properties: VolcengineSigningProperties,
        http_request: SigningRequest,
        identity: VolcengineCredentials,
    ) -> VolcengineAuthorization:
        """Compute the authorization value without building the header map."""
        _, result = self._authorize(
            signing_properties=signing_properties,
            http_request=http_request,
            identity=identity,
        )
        return result

    def _authorize(
        self,
        *,
        signing_properties: VolcengineSigningProperties,
        http_request: SigningRequest,
        identity: VolcengineCredentials,
    ) -> tuple[SigningRequest, VolcengineAuthorization]:
        self._validate_identity(identity=identity)
        require_request_target(http_request)
        new_signing_properties = self._normalize_signing_properties(
            signing_properties=signing_properties
        )
        x_date = compact_timestamp(new_signing_properties["timestamp"])

        new_request = deepcopy(http_request)
        self._apply_required_fields(
            request=new_request, x_date=x_date, identity=identity
        )

        canonical_request = self.canonical_request(request=new_request)
        string_to_sign = self.string_to_sign(
            canonical_request=canonical_request,
            x_date=x_date,
            signing_properties=new_signing_properties,
        )
        signature = self._signature(
            string_to_sign=string_to_sign,
            secret_key=identity.secret_access_key,
            date_stamp=x_date[0:8],
            signing_properties=new_signing_properties,
        )

        signed_headers = tuple(normalize_fields(new_request.fields))
        scope = self._scope(
            date_stamp=x_date[0:8], signing_properties=new_signing_properties
        )
        authorization = (
            f"{ALGORITHM} Credential={identity.access_key_id}/{scope}, "
            f"SignedHeaders={';'.join(signed_headers)}, Signature={signature}"
        )
        return new_request, VolcengineAuthorization(
            authorization=authorization,
            x_date=x_date,
            hashed_payload=sha256_hex(new_request.body),
            signed_headers=signed_headers,
        )

    def canonical_request(self, *, request: SigningRequest) -> str:
        """Build the canonical request for an already prepared request.

        Volcengine defines the canonical request to be:
            <HTTPMethod>\n
            <CanonicalURI>\n
            <CanonicalQueryString>\n
            <CanonicalHeaders>\n
            <SignedHeaders>\n
            <HashedPayload>

        where every canonical header line ends in ``\n``.

        :param request: A SigningRequest that already carries ``Host`` and
            ``X-Date``.
        """
        # We generate the payload first to ensure any field modifications
        # are in place before choosing the canonical fields.
        canonical_payload = self._format_canonical_payload(request=request)
        normalized_fields = normalize_fields(request.fields)
        canonical_fields = "".join(
            f"{name}:{value}\n" for name, value in normalized_fields.items()
        )
        canonical_request = (
            f"{request.method.upper()}\n"
            f"{self._format_canonical_path(path=request.path)}\n"
            f"{canonical_query(request.query)}\n"
            f"{canonical_fields}\n"
            f"{';'.join(normalized_fields)}\n"
            f"{canonical_payload}"
        )
        logger.debug("Volcengine canonical request:\n%s", canonical_request)
        return canonical_request

    def string_to_sign(
        self,
        *,
        canonical_request: str,
        x_date: str,
        signing_properties: VolcengineSigningProperties,
    ) -> str:
        """Build the string to sign.

        Volcengine defines the string to sign as:
            HMAC-SHA256\n
            <XDate>\n
            <YYYYMMDD>/<Region>/<Service>/request\n
            <HashedCanonicalRequest>
        """
        scope = self._scope(
            date_stamp=x_date[0:8], signing_properties=signing_properties
        )
        string_to_sign = (
            f"{ALGORITHM}\n"
            f"{x_date}\n"
            f"{scope}\n"
            f"{sha256(canonical_request.encode()).hexdigest()}"
        )
        logger.debug("Volcengine string to sign:\n%s", string_to_sign)
        return string_to_sign

    def _signature(
        self,
        *,
        string_to_sign: str,
        secret_key: str,
        date_stamp: str,
        signing_properties: VolcengineSigningProperties,
    ) -> str:
        # Components of Signing Key Calculation
        #
        # DateKey              = HMAC-SHA256("<SecretAccessKey>", "<YYYYMMDD>")
        # DateRegionKey        = HMAC-SHA256(<DateKey>, "<region>")
        # DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<service>")
        # SigningKey = HMAC-SHA256(<DateRegionServiceKey>, "request")
        k_date = hmac_sha256(key=secret_key, value=date_stamp)
        k_region = hmac_sha256(key=k_date, value=signing_properties["region"])
        k_service = hmac_sha256(key=k_region, value=signing_properties["service"])
        k_signing = hmac_sha256(key=k_service, value="request")

        return hmac_sha256(key=k_signing, value=string_to_sign).hex()

    def _scope(
        self, *, date_stamp: str, signing_properties: VolcengineSigningProperties
    ) -> str:
        region = signing_properties["region"]
        service = signing_properties["service"]
        # Scope format: <YYYYMMDD>/<region>/<service>/request
        return f"{date_stamp}/{region}/{service}/request"

    def _format_canonical_path(self, *, path: str | None) -> str:
        if not path:
            path = "/"
        if not path.startswith("/"):
            path = f"/{path}"
        if not path.endswith("/"):
            path = f"{path}/"
        return encode_path_segments(path)

    def _format_canonical_payload(self, *, request: SigningRequest) -> str:
        payload_hash = sha256_hex(request.body)
        if CONTENT_SHA256_HEADER in request.fields:
            request.fields.set_field(
                Field(name=CONTENT_SHA256_HEADER, values=[payload_hash])
            )
        return payload_hash

    def _validate_identity(self, *, identity: VolcengineCredentials) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, VolcengineCredentials):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"VolcengineCredentials but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )

    def _normalize_signing_properties(
        self, *, signing_properties: VolcengineSigningProperties
    ) -> VolcengineSigningProperties:
        # Create copy of signing properties to avoid mutating the original
        new_signing_properties = VolcengineSigningProperties(**signing_properties)
        for name in ("region", "service"):
            if not new_signing_properties.get(name):
                raise MissingExpectedParameterException(
                    f"Volcengine signing requires '{name}' in signing_properties."
                )
        if "timestamp" not in new_signing_properties:
            new_signing_properties["timestamp"] = utc_now()
        return new_signing_properties

    def _apply_required_fields(
        self,
        *,
        request: SigningRequest,
        x_date: str,
        identity: VolcengineCredentials,
    ) -> None:
        request.host = request.host.lower()
        request.fields.set_field(Field(name="Host", values=[request.host]))
        request.fields.set_field(Field(name=DATE_HEADER, values=[x_date]))
        if (
            SECURITY_TOKEN_HEADER not in request.fields
            and identity.session_token is not None
        ):
            request.fields.set_field(
                Field(name=SECURITY_TOKEN_HEADER, values=[identity.session_token])
            )
