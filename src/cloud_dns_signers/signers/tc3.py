# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tencent Cloud ``TC3-HMAC-SHA256`` request signing.

Used by DNSPod at ``dnspod.tencentcloudapi.com``. Tencent Cloud APIs take a JSON
body posted to ``/`` and select the operation with the ``X-TC-Action`` header.
"""

import datetime
import logging
from copy import deepcopy
from dataclasses import dataclass
from hashlib import sha256
from typing import Final, Required, TypedDict

from .._canonical import (
    canonical_query,
    hmac_sha256,
    require_request_target,
    sha256_hex,
    utc_now,
)
from .._http import Field, SigningRequest
from .._identity import TC3Credentials
from ..exceptions import InvalidSigningInputError, MissingExpectedParameterException

logger: Final = logging.getLogger(__name__)

DEFAULT_HOST: Final = "dnspod.tencentcloudapi.com"
DEFAULT_SERVICE: Final = "dnspod"
DEFAULT_VERSION: Final = "2021-03-23"
DEFAULT_CONTENT_TYPE: Final = "application/json; charset=utf-8"
ALGORITHM: Final = "TC3-HMAC-SHA256"
SIGNED_HEADERS: Final = "content-type;host"


class TC3SigningProperties(TypedDict, total=False):
    service: Required[str]
    action: Required[str]
    version: Required[str]
    # Unix time in seconds.
    timestamp: int
    # Sent as X-TC-Region, DNSPod doesn't require it.
    region: str


@dataclass(frozen=True, kw_only=True)
class TC3Authorization:
    authorization: str
    timestamp: int
    """Value for the ``X-TC-Timestamp`` header."""

    credential_scope: str


class TC3Signer:
    """Request signer for Tencent Cloud's ``TC3-HMAC-SHA256`` scheme.

    Only ``POST /`` requests without a query string are supported. The signed
    headers are always exactly ``content-type`` and ``host``.
    """

    def sign(
        self,
        *,
        signing_properties: TC3SigningProperties,
        http_request: SigningRequest,
        identity: TC3Credentials,
    ) -> SigningRequest:
        """Generate and apply a TC3 signature to a copy of the supplied request.

        :param signing_properties: TC3SigningProperties naming the service, action
            and API version.
        :param http_request: A ``POST /`` SigningRequest whose body is the JSON
            payload.
        :param identity: The Tencent Cloud SecretId/SecretKey pair.
        """
        # Pin the timestamp once so X-TC-Timestamp matches the signed value.
        new_signing_properties = self._normalize_signing_properties(
            signing_properties=signing_properties
        )
        new_request, result = self._authorize(
            signing_properties=new_signing_properties,
            http_request=http_request,
            identity=identity,
        )
        fields = new_request.fields
        fields.set_field(Field(name="Authorization", values=[result.authorization]))
        fields.set_field(
            Field(name="X-TC-Action", values=[new_signing_properties["action"]])
        )
        fields.set_field(
            Field(name="X-TC-Version", values=[new_signing_properties["version"]])
        )
        fields.set_field(Field(name="X-TC-Timestamp", values=[str(result.timestamp)]))
        if identity.token:
            fields.set_field(Field(name="X-TC-Token", values=[identity.token]))
        if region := new_signing_properties.get("region"):
            fields.set_field(Field(name="X-TC-Region", values=[region]))
        return new_request

    def generate_authorization(
        self,
        *,
        signing_properties: TC3SigningProperties,
        http_request: SigningRequest,
        identity: TC3Credentials,
    ) -> TC3Authorization:
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
        signing_properties: TC3SigningProperties,
        http_request: SigningRequest,
        identity: TC3Credentials,
    ) -> tuple[SigningRequest, TC3Authorization]:
        self._validate_identity(identity=identity)
        require_request_target(http_request)
        self._validate_request_target(request=http_request)
        new_signing_properties = self._normalize_signing_properties(
            signing_properties=signing_properties
        )

        new_request = deepcopy(http_request)
        self._apply_required_fields(request=new_request)

        canonical_request = self.canonical_request(request=new_request)
        string_to_sign = self.string_to_sign(
            canonical_request=canonical_request,
            signing_properties=new_signing_properties,
        )
        signature = self._signature(
            string_to_sign=string_to_sign,
            secret_key=identity.secret_key,
            signing_properties=new_signing_properties,
        )

        credential_scope = self._scope(signing_properties=new_signing_properties)
        authorization = (
            f"{ALGORITHM} Credential={identity.secret_id}/{credential_scope}, "
            f"SignedHeaders={SIGNED_HEADERS}, Signature={signature}"
        )
        return new_request, TC3Authorization(
            authorization=authorization,
            timestamp=new_signing_properties["timestamp"],
            credential_scope=credential_scope,
        )

    def canonical_request(self, *, request: SigningRequest) -> str:
        """Build the canonical request.

        TC3 defines the canonical request to be:
            POST\n
            /\n
            \n
            content-type:<ContentType>\n
            host:<Host>\n
            \n
            content-type;host\n
            <HashedPayload>

        :param request: A SigningRequest that already carries ``Host`` and
            ``Content-Type``.
        """
        content_type = request.fields["Content-Type"].as_string().strip().lower()
        host = request.host.lower()
        canonical_request = (
            "POST\n"
            "/\n"
            "\n"
            f"content-type:{content_type}\n"
            f"host:{host}\n"
            "\n"
            f"{SIGNED_HEADERS}\n"
            f"{sha256_hex(request.body)}"
        )
        logger.debug("TC3 canonical request:\n%s", canonical_request)
        return canonical_request

    def string_to_sign(
        self, *, canonical_request: str, signing_properties: TC3SigningProperties
    ) -> str:
        """Build the string to sign.

        TC3 defines the string to sign as:
            TC3-HMAC-SHA256\n
            <Timestamp>\n
            <Date>/<Service>/tc3_request\n
            <HashedCanonicalRequest>
        """
        timestamp = signing_properties.get("timestamp")
        if timestamp is None:
            raise MissingExpectedParameterException(
                "Cannot generate string_to_sign without a valid timestamp "
                f"in your signing_properties. Current value: {timestamp}"
            )
        string_to_sign = (
            f"{ALGORITHM}\n"
            f"{timestamp}\n"
            f"{self._scope(signing_properties=signing_properties)}\n"
            f"{sha256(canonical_request.encode()).hexdigest()}"
        )
        logger.debug("TC3 string to sign:\n%s", string_to_sign)
        return string_to_sign

    def _signature(
        self,
        *,
        string_to_sign: str,
        secret_key: str,
        signing_properties: TC3SigningProperties,
    ) -> str:
        # Components of Signing Key Calculation
        #
        # SecretDate    = HMAC-SHA256("TC3"+"<SecretKey>", "<YYYY-MM-DD>")
        # SecretService = HMAC-SHA256(<SecretDate>, "<service>")
        # SecretSigning = HMAC-SHA256(<SecretService>, "tc3_request")
        date = tc3_date(signing_properties["timestamp"])
        secret_date = hmac_sha256(key=f"TC3{secret_key}", value=date)
        secret_service = hmac_sha256(
            key=secret_date, value=signing_properties["service"]
        )
        secret_signing = hmac_sha256(key=secret_service, value="tc3_request")

        return hmac_sha256(key=secret_signing, value=string_to_sign).hex()

    def _scope(self, signing_properties: TC3SigningProperties) -> str:
        date = tc3_date(signing_properties["timestamp"])
        # Scope format: <YYYY-MM-DD>/<service>/tc3_request
        return f"{date}/{signing_properties['service']}/tc3_request"

    def _validate_identity(self, *, identity: TC3Credentials) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, TC3Credentials):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"TC3Credentials but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )

    def _validate_request_target(self, *, request: SigningRequest) -> None:
        if request.method.upper() != "POST":
            raise InvalidSigningInputError(
                f"TC3 signing only supports POST requests, got {request.method!r}."
            )
        if request.path not in (None, "", "/"):
            raise InvalidSigningInputError(
                f"TC3 signing only supports the root path, got {request.path!r}."
            )
        if canonical_query(request.query):
            raise InvalidSigningInputError(
                "TC3 signing doesn't support query parameters. Send them in the "
                "JSON body instead."
            )

    def _normalize_signing_properties(
        self, *, signing_properties: TC3SigningProperties
    ) -> TC3SigningProperties:
        # Create copy of signing properties to avoid mutating the original
        new_signing_properties = TC3SigningProperties(**signing_properties)
        for name in ("service", "action", "version"):
            if not new_signing_properties.get(name):
                raise MissingExpectedParameterException(
                    f"TC3 signing requires '{name}' in signing_properties."
                )
        if "timestamp" not in new_signing_properties:
            new_signing_properties["timestamp"] = int(utc_now().timestamp())
        return new_signing_properties

    def _apply_required_fields(self, *, request: SigningRequest) -> None:
        request.host = request.host.lower()
        request.fields.set_field(Field(name="Host", values=[request.host]))
        content_type = request.fields.get("Content-Type")
        if content_type is None or not content_type.as_string():
            request.fields.set_field(
                Field(name="Content-Type", values=[DEFAULT_CONTENT_TYPE])
            )


def tc3_date(timestamp: int) -> str:
    """UTC calendar date (``YYYY-MM-DD``) of a unix timestamp in seconds."""
    return datetime.datetime.fromtimestamp(timestamp, datetime.UTC).strftime(
        "%Y-%m-%d"
    )
