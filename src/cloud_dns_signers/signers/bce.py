# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Baidu AI Cloud ``bce-auth-v1`` request signing.

Used by the Baidu Cloud DNS API at ``dns.baidubce.com``. The authorization
value has the form::

    bce-auth-v1/{accessKey}/{timestamp}/{expiration}/{signedHeaders}/{signature}
"""

import datetime
import hmac
import logging
import uuid
import warnings
from copy import deepcopy
from dataclasses import dataclass
from hashlib import sha256
from typing import Final, TypedDict

from .._canonical import (
    canonical_query,
    encode_path_segments,
    iso8601_timestamp,
    normalize_fields,
    percent_encode,
    require_request_target,
    utc_now,
)
from .._http import Field, SigningRequest
from .._identity import BCECredentials
from ..exceptions import DNSSignerWarning

logger: Final = logging.getLogger(__name__)

DEFAULT_HOST: Final = "dns.baidubce.com"
DEFAULT_EXPIRATION_IN_SECONDS: Final = 1800
AUTH_VERSION: Final = "bce-auth-v1"
DATE_HEADER: Final = "x-bce-date"
SECURITY_TOKEN_HEADER: Final = "x-bce-security-token"


class BCESigningProperties(TypedDict, total=False):
    timestamp: datetime.datetime
    expiration_in_seconds: int


@dataclass(frozen=True, kw_only=True)
class BCEAuthorization:
    authorization: str
    """Value for the ``Authorization`` header."""

    bce_date: str
    """Value for the ``x-bce-date`` header. It must be sent unchanged."""

    signed_headers: tuple[str, ...]


class BCESigner:
    """Request signer for the Baidu ``bce-auth-v1`` scheme.

    Every header on the request is signed, not an allow-list, and the header
    values in the canonical request are percent-encoded. The canonical request
    carries no payload hash.
    """

    def sign(
        self,
        *,
        signing_properties: BCESigningProperties,
        http_request: SigningRequest,
        identity: BCECredentials,
    ) -> SigningRequest:
        """Generate and apply a bce-auth-v1 signature to a copy of the request.

        :param signing_properties: BCESigningProperties holding the timestamp and
            expiration window.
        :param http_request: A SigningRequest to sign prior to sending to the API.
        :param identity: The BCE access key pair.
        :returns: A copy of the request carrying ``Host``, ``x-bce-date`` and
            ``Authorization`` headers alongside the caller's own.
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
        signing_properties: BCESigningProperties,
        http_request: SigningRequest,
        identity: BCECredentials,
    ) -> BCEAuthorization:
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
        signing_properties: BCESigningProperties,
        http_request: SigningRequest,
        identity: BCECredentials,
    ) -> tuple[SigningRequest, BCEAuthorization]:
        self._validate_identity(identity=identity)
        require_request_target(http_request)
        new_signing_properties = self._normalize_signing_properties(
            signing_properties=signing_properties
        )
        bce_date = iso8601_timestamp(new_signing_properties["timestamp"])

        new_request = self._generate_new_request(request=http_request)
        self._apply_required_fields(
            request=new_request, bce_date=bce_date, identity=identity
        )

        auth_string_prefix = (
            f"{AUTH_VERSION}/{identity.access_key}/{bce_date}/"
            f"{new_signing_properties['expiration_in_seconds']}"
        )
        canonical_request = self.canonical_request(request=new_request)
        signature = self._signature(
            canonical_request=canonical_request,
            auth_string_prefix=auth_string_prefix,
            secret_key=identity.secret_key,
        )

        signed_headers = tuple(normalize_fields(new_request.fields))
        authorization = f"{auth_string_prefix}/{';'.join(signed_headers)}/{signature}"
        return new_request, BCEAuthorization(
            authorization=authorization,
            bce_date=bce_date,
            signed_headers=signed_headers,
        )

    def canonical_request(self, *, request: SigningRequest) -> str:
        """Build the canonical request for an already prepared request.

        The BCE DNS API defines the canonical request as:
            <HTTPMethod>\n
            <CanonicalURI>\n
            <CanonicalQueryString>\n
            <CanonicalHeaders>

        :param request: A SigningRequest that already carries ``Host`` and
            ``x-bce-date``.
        """
        normalized_fields = normalize_fields(request.fields)
        canonical_fields = "\n".join(
            f"{percent_encode(name)}:{percent_encode(value)}"
            for name, value in normalized_fields.items()
        )
        canonical_request = (
            f"{request.method.upper()}\n"
            f"{self._format_canonical_path(path=request.path)}\n"
            f"{canonical_query(request.query, exclude=('authorization',))}\n"
            f"{canonical_fields}"
        )
        logger.debug("BCE canonical request:\n%s", canonical_request)
        return canonical_request

    def _signature(
        self, *, canonical_request: str, auth_string_prefix: str, secret_key: str
    ) -> str:
        # SigningKey = HexHMAC-SHA256(<SecretKey>, <AuthStringPrefix>)
        # Signature  = HexHMAC-SHA256(<SigningKey as hex text>, <CanonicalRequest>)
        signing_key = self._hash(key=secret_key, value=auth_string_prefix)
        return self._hash(key=signing_key, value=canonical_request)

    def _hash(self, key: str, value: str) -> str:
        return hmac.new(
            key=key.encode(), msg=value.encode(), digestmod=sha256
        ).hexdigest()

    def _format_canonical_path(self, *, path: str | None) -> str:
        if not path:
            path = "/"
        if not path.startswith("/"):
            path = f"/{path}"
        return encode_path_segments(path)

    def _validate_identity(self, *, identity: BCECredentials) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, BCECredentials):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"BCECredentials but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )

    def _normalize_signing_properties(
        self, *, signing_properties: BCESigningProperties
    ) -> BCESigningProperties:
        # Create copy of signing properties to avoid mutating the original
        new_signing_properties = BCESigningProperties(**signing_properties)
        if "timestamp" not in new_signing_properties:
            new_signing_properties["timestamp"] = utc_now()
        expiration = new_signing_properties.get(
            "expiration_in_seconds", DEFAULT_EXPIRATION_IN_SECONDS
        )
        if expiration < 1:
            warnings.warn(
                f"expiration_in_seconds must be positive, got {expiration}. "
                "Signing with an expiration of 1 second.",
                DNSSignerWarning,
            )
            expiration = 1
        new_signing_properties["expiration_in_seconds"] = expiration
        return new_signing_properties

    def _generate_new_request(self, *, request: SigningRequest) -> SigningRequest:
        return deepcopy(request)

    def _apply_required_fields(
        self, *, request: SigningRequest, bce_date: str, identity: BCECredentials
    ) -> None:
        request.host = request.host.lower()
        request.fields.set_field(Field(name="Host", values=[request.host]))
        request.fields.set_field(Field(name=DATE_HEADER, values=[bce_date]))
        if (
            SECURITY_TOKEN_HEADER not in request.fields
            and identity.session_token is not None
        ):
            request.fields.set_field(
                Field(name=SECURITY_TOKEN_HEADER, values=[identity.session_token])
            )


def generate_client_token() -> str:
    """Return a random idempotency token for the ``clientToken`` query parameter."""
    return str(uuid.uuid4())
