# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""JDCloud ``JDCLOUD2-HMAC-SHA256`` request signing.

Used by the JDCloud domain service at ``domainservice.jdcloud-api.com``. The
gateway rejects requests without an ``x-jdcloud-nonce`` header.
"""

import datetime
import logging
import secrets
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
from .._identity import JDCloudCredentials
from ..exceptions import MissingExpectedParameterException

logger: Final = logging.getLogger(__name__)

DEFAULT_HOST: Final = "domainservice.jdcloud-api.com"
DEFAULT_SERVICE: Final = "domainservice"
DEFAULT_REGION: Final = "cn-north-1"
ALGORITHM: Final = "JDCLOUD2-HMAC-SHA256"
DATE_HEADER: Final = "x-jdcloud-date"
NONCE_HEADER: Final = "x-jdcloud-nonce"
SECURITY_TOKEN_HEADER: Final = "x-jdcloud-security-token"
SIGNED_HEADER_PREFIX: Final = "x-jdcloud-"
ALWAYS_SIGNED_HEADERS: Final = ("host", DATE_HEADER, "content-type")


class JDCloudSigningProperties(TypedDict, total=False):
    region: Required[str]
    service: Required[str]
    timestamp: datetime.datetime


@dataclass(frozen=True, kw_only=True)
class JDCloudAuthorization:
    authorization: str
    jdcloud_date: str
    """Value for the ``x-jdcloud-date`` header."""

    nonce: str
    """Value for the ``x-jdcloud-nonce`` header. It is covered by the signature."""

    signed_headers: tuple[str, ...]


class JDCloudSigner:
    """Request signer for JDCloud's ``JDCLOUD2-HMAC-SHA256`` scheme.

    Only ``host``, ``content-type`` and ``x-jdcloud-*`` headers are signed. A nonce
    is generated per call unless the request already carries one.
    """

    def sign(
        self,
        *,
        signing_properties: JDCloudSigningProperties,
        http_request: SigningRequest,
        identity: JDCloudCredentials,
    ) -> SigningRequest:
        """Generate and apply a signature to a copy of the supplied request.

        :param signing_properties: JDCloudSigningProperties to define the target
            service, region, and timestamp.
        :param http_request: A SigningRequest to sign prior to sending to the API.
            Supply an ``x-jdcloud-nonce`` header to make the output reproducible.
        :param identity: The JDCloud access key pair.
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
        signing_properties: JDCloudSigningProperties,
        http_request: SigningRequest,
        identity: JDCloudCredentials,
    ) -> JDCloudAuthorization:
        """Compute the authorization value without building the header map.

        The returned nonce must be sent as ``x-jdcloud-nonce``.
        """
        _, result = self._authorize(
            signing_properties=signing_properties,
            http_request=http_request,
            identity=identity,
        )
        return result

    def _authorize(
        self,
        *,
        signing_properties: JDCloudSigningProperties,
        http_request: SigningRequest,
        identity: JDCloudCredentials,
    ) -> tuple[SigningRequest, JDCloudAuthorization]:
        self._validate_identity(identity=identity)
        require_request_target(http_request)
        new_signing_properties = self._normalize_signing_properties(
            signing_properties=signing_properties
        )
        jdcloud_date = compact_timestamp(new_signing_properties["timestamp"])

        new_request = deepcopy(http_request)
        self._apply_required_fields(
            request=new_request, jdcloud_date=jdcloud_date, identity=identity
        )

        canonical_request = self.canonical_request(request=new_request)
        string_to_sign = self.string_to_sign(
            canonical_request=canonical_request,
            jdcloud_date=jdcloud_date,
            signing_properties=new_signing_properties,
        )
        signature = self._signature(
            string_to_sign=string_to_sign,
            secret_key=identity.access_key_secret,
            date_stamp=jdcloud_date[0:8],
            signing_properties=new_signing_properties,
        )

        signed_headers = tuple(self._normalize_signing_fields(request=new_request))
        scope = self._scope(
            date_stamp=jdcloud_date[0:8], signing_properties=new_signing_properties
        )
        authorization = (
            f"{ALGORITHM} Credential={identity.access_key_id}/{scope}, "
            f"SignedHeaders={';'.join(signed_headers)}, Signature={signature}"
        )
        return new_request, JDCloudAuthorization(
            authorization=authorization,
            jdcloud_date=jdcloud_date,
            nonce=new_request.fields[NONCE_HEADER].as_string(),
            signed_headers=signed_headers,
        )

    def canonical_request(self, *, request: SigningRequest) -> str:
        """Build the canonical request for an already prepared request.

        JDCloud defines the canonical request to be:
            <HTTPMethod>\n
            <CanonicalURI>\n
            <CanonicalQueryString>\n
            <CanonicalHeaders>\n
            <SignedHeaders>\n
            <HashedPayload>

        where every canonical header line ends in ``\n``.

        :param request: A SigningRequest that already carries ``Host``,
            ``x-jdcloud-date`` and ``x-jdcloud-nonce``.
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
        logger.debug("JDCloud canonical request:\n%s", canonical_request)
        return canonical_request

    def string_to_sign(
        self,
        *,
        canonical_request: str,
        jdcloud_date: str,
        signing_properties: JDCloudSigningProperties,
    ) -> str:
        """Build the string to sign.

        JDCloud defines the string to sign as:
            JDCLOUD2-HMAC-SHA256\n
            <JDCloudDate>\n
            <YYYYMMDD>/<Region>/<Service>/jdcloud2_request\n
            <HashedCanonicalRequest>
        """
        scope = self._scope(
            date_stamp=jdcloud_date[0:8], signing_properties=signing_properties
        )
        string_to_sign = (
            f"{ALGORITHM}\n"
            f"{jdcloud_date}\n"
            f"{scope}\n"
            f"{sha256(canonical_request.encode()).hexdigest()}"
        )
        logger.debug("JDCloud string to sign:\n%s", string_to_sign)
        return string_to_sign

    def _signature(
        self,
        *,
        string_to_sign: str,
        secret_key: str,
        date_stamp: str,
        signing_properties: JDCloudSigningProperties,
    ) -> str:
        # Components of Signing Key Calculation
        #
        # DateKey              = HMAC-SHA256("JDCLOUD2"+"<Secret>", "<YYYYMMDD>")
        # DateRegionKey        = HMAC-SHA256(<DateKey>, "<region>")
        # DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<service>")
        # SigningKey = HMAC-SHA256(<DateRegionServiceKey>, "jdcloud2_request")
        k_date = hmac_sha256(key=f"JDCLOUD2{secret_key}", value=date_stamp)
        k_region = hmac_sha256(key=k_date, value=signing_properties["region"])
        k_service = hmac_sha256(key=k_region, value=signing_properties["service"])
        k_signing = hmac_sha256(key=k_service, value="jdcloud2_request")

        return hmac_sha256(key=k_signing, value=string_to_sign).hex()

    def _scope(
        self, *, date_stamp: str, signing_properties: JDCloudSigningProperties
    ) -> str:
        region = signing_properties["region"]
        service = signing_properties["service"]
        # Scope format: <YYYYMMDD>/<region>/<service>/jdcloud2_request
        return f"{date_stamp}/{region}/{service}/jdcloud2_request"

    def _normalize_signing_fields(self, *, request: SigningRequest) -> dict[str, str]:
        return {
            name: value
            for name, value in normalize_fields(request.fields).items()
            if self._is_signable_header(name)
        }

    def _is_signable_header(self, field_name: str) -> bool:
        return field_name in ALWAYS_SIGNED_HEADERS or field_name.startswith(
            SIGNED_HEADER_PREFIX
        )

    def _format_canonical_path(self, *, path: str | None) -> str:
        if not path:
            path = "/"
        if not path.startswith("/"):
            path = f"/{path}"
        return encode_path_segments(path)

    def _validate_identity(self, *, identity: JDCloudCredentials) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, JDCloudCredentials):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"JDCloudCredentials but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )

    def _normalize_signing_properties(
        self, *, signing_properties: JDCloudSigningProperties
    ) -> JDCloudSigningProperties:
        # Create copy of signing properties to avoid mutating the original
        new_signing_properties = JDCloudSigningProperties(**signing_properties)
        for name in ("region", "service"):
            if not new_signing_properties.get(name):
                raise MissingExpectedParameterException(
                    f"JDCloud signing requires '{name}' in signing_properties."
                )
        if "timestamp" not in new_signing_properties:
            new_signing_properties["timestamp"] = utc_now()
        return new_signing_properties

    def _apply_required_fields(
        self,
        *,
        request: SigningRequest,
        jdcloud_date: str,
        identity: JDCloudCredentials,
    ) -> None:
        request.host = request.host.lower()
        request.fields.set_field(Field(name="Host", values=[request.host]))
        request.fields.set_field(Field(name=DATE_HEADER, values=[jdcloud_date]))
        if NONCE_HEADER not in request.fields:
            request.fields.set_field(Field(name=NONCE_HEADER, values=[new_nonce()]))
        if (
            SECURITY_TOKEN_HEADER not in request.fields
            and identity.session_token is not None
        ):
            request.fields.set_field(
                Field(name=SECURITY_TOKEN_HEADER, values=[identity.session_token])
            )


def new_nonce() -> str:
    """32 lowercase hex characters from 16 random bytes."""
    return secrets.token_hex(16)
