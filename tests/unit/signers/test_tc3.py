# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import copy
import typing
from datetime import UTC, datetime

import pytest
from cloud_dns_signers import (
    SigningRequest,
    TC3Credentials,
    TC3Signer,
    TC3SigningProperties,
)
from cloud_dns_signers.exceptions import (
    InvalidSigningInputError,
    MissingExpectedParameterException,
)
from cloud_dns_signers.signers.tc3 import (
    DEFAULT_CONTENT_TYPE,
    DEFAULT_HOST,
    DEFAULT_SERVICE,
    DEFAULT_VERSION,
    tc3_date,
)
from freezegun import freeze_time

SECRET_ID: str = "AKIDz8krbsJ5yKBZQpn74WFkmLPx3EXAMPLE"
SECRET_KEY: str = "Gu5t9xGARNpq86cd98joQYCN3EXAMPLE"
TIMESTAMP: int = 1700000000
PAYLOAD: str = '{"Domain":"example.com"}'
SIGNATURE: str = "38a6d181e435a386f8ca3e6591662068b07517fe6ec30a3094c41cb2e24357cf"


@pytest.fixture(scope="module")
def tc3_identity() -> TC3Credentials:
    return TC3Credentials(secret_id=SECRET_ID, secret_key=SECRET_KEY)


@pytest.fixture(scope="module")
def signing_properties() -> TC3SigningProperties:
    return TC3SigningProperties(
        service=DEFAULT_SERVICE,
        action="DescribeRecordList",
        version=DEFAULT_VERSION,
        timestamp=TIMESTAMP,
    )


@pytest.fixture
def tc3_request() -> SigningRequest:
    return SigningRequest(method="POST", host=DEFAULT_HOST, body=PAYLOAD)


class TestTC3Signer:
    TC3_SIGNER = TC3Signer()

    def test_canonical_request(self) -> None:
        request = SigningRequest(
            method="POST",
            host=DEFAULT_HOST,
            fields={"Content-Type": DEFAULT_CONTENT_TYPE},
            body=PAYLOAD,
        )
        assert self.TC3_SIGNER.canonical_request(request=request) == (
            "POST\n"
            "/\n"
            "\n"
            "content-type:application/json; charset=utf-8\n"
            "host:dnspod.tencentcloudapi.com\n"
            "\n"
            "content-type;host\n"
            "a29f72dc6ea1d96e576baa90b7c0dd3446f0d256c59fd3a2b97a9a275ffd2a31"
        )

    def test_string_to_sign(self, signing_properties: TC3SigningProperties) -> None:
        string_to_sign = self.TC3_SIGNER.string_to_sign(
            canonical_request="canonical", signing_properties=signing_properties
        )
        assert string_to_sign.split("\n")[:3] == [
            "TC3-HMAC-SHA256",
            "1700000000",
            "2023-11-14/dnspod/tc3_request",
        ]

    def test_sign_known_signature(
        self,
        tc3_identity: TC3Credentials,
        tc3_request: SigningRequest,
        signing_properties: TC3SigningProperties,
    ) -> None:
        signed_request = self.TC3_SIGNER.sign(
            signing_properties=signing_properties,
            http_request=tc3_request,
            identity=tc3_identity,
        )
        assert signed_request.fields.as_dict() == {
            "Host": "dnspod.tencentcloudapi.com",
            "Content-Type": "application/json; charset=utf-8",
            "Authorization": (
                "TC3-HMAC-SHA256 Credential="
                "AKIDz8krbsJ5yKBZQpn74WFkmLPx3EXAMPLE/2023-11-14/dnspod/tc3_request, "
                f"SignedHeaders=content-type;host, Signature={SIGNATURE}"
            ),
            "X-TC-Action": "DescribeRecordList",
            "X-TC-Version": "2021-03-23",
            "X-TC-Timestamp": "1700000000",
        }

    def test_generate_authorization(
        self,
        tc3_identity: TC3Credentials,
        tc3_request: SigningRequest,
        signing_properties: TC3SigningProperties,
    ) -> None:
        result = self.TC3_SIGNER.generate_authorization(
            signing_properties=signing_properties,
            http_request=tc3_request,
            identity=tc3_identity,
        )
        assert result.timestamp == TIMESTAMP
        assert result.credential_scope == "2023-11-14/dnspod/tc3_request"
        assert result.authorization.endswith(f"Signature={SIGNATURE}")

    @pytest.mark.parametrize(
        "content_type",
        ["application/json; charset=utf-8", "  Application/JSON; charset=UTF-8 "],
    )
    def test_content_type_is_normalized(
        self,
        tc3_identity: TC3Credentials,
        signing_properties: TC3SigningProperties,
        content_type: str,
    ) -> None:
        result = self.TC3_SIGNER.generate_authorization(
            signing_properties=signing_properties,
            http_request=SigningRequest(
                method="post",
                host="DNSPod.TencentCloudAPI.com",
                path="/",
                fields={"Content-Type": content_type},
                body=PAYLOAD.encode(),
            ),
            identity=tc3_identity,
        )
        assert result.authorization.endswith(f"Signature={SIGNATURE}")

    def test_payload_changes_signature(
        self,
        tc3_identity: TC3Credentials,
        tc3_request: SigningRequest,
        signing_properties: TC3SigningProperties,
    ) -> None:
        tc3_request.body = '{"Domain":"example.org"}'
        result = self.TC3_SIGNER.generate_authorization(
            signing_properties=signing_properties,
            http_request=tc3_request,
            identity=tc3_identity,
        )
        assert not result.authorization.endswith(f"Signature={SIGNATURE}")

    def test_token_and_region_headers(
        self,
        tc3_request: SigningRequest,
        signing_properties: TC3SigningProperties,
    ) -> None:
        identity = TC3Credentials(
            secret_id=SECRET_ID, secret_key=SECRET_KEY, token="SESSIONTOKEN"
        )
        signed_request = self.TC3_SIGNER.sign(
            signing_properties={**signing_properties, "region": "ap-guangzhou"},
            http_request=tc3_request,
            identity=identity,
        )
        assert signed_request.fields["X-TC-Token"].as_string() == "SESSIONTOKEN"
        assert signed_request.fields["X-TC-Region"].as_string() == "ap-guangzhou"
        # Neither header is part of the signature.
        assert signed_request.fields["Authorization"].as_string().endswith(
            f"Signature={SIGNATURE}"
        )

    @freeze_time("2023-11-14 22:13:20")
    def test_sign_defaults_timestamp_to_now(
        self, tc3_identity: TC3Credentials, tc3_request: SigningRequest
    ) -> None:
        signed_request = self.TC3_SIGNER.sign(
            signing_properties=TC3SigningProperties(
                service=DEFAULT_SERVICE,
                action="DescribeRecordList",
                version=DEFAULT_VERSION,
            ),
            http_request=tc3_request,
            identity=tc3_identity,
        )
        assert signed_request.fields["X-TC-Timestamp"].as_string() == "1700000000"
        assert signed_request.fields["Authorization"].as_string().endswith(
            f"Signature={SIGNATURE}"
        )

    @pytest.mark.parametrize(
        "method,path,query",
        [
            ("GET", "/", None),
            ("POST", "/v2/records", None),
            ("POST", "/", {"Action": "DescribeRecordList"}),
        ],
    )
    def test_sign_rejects_unsupported_request_shape(
        self,
        tc3_identity: TC3Credentials,
        signing_properties: TC3SigningProperties,
        method: str,
        path: str,
        query: dict[str, str] | None,
    ) -> None:
        request = SigningRequest(
            method=method, host=DEFAULT_HOST, path=path, query=query, body=PAYLOAD
        )
        with pytest.raises(InvalidSigningInputError):
            self.TC3_SIGNER.sign(
                signing_properties=signing_properties,
                http_request=request,
                identity=tc3_identity,
            )

    @pytest.mark.parametrize("missing", ["service", "action", "version"])
    def test_sign_without_required_property(
        self,
        tc3_identity: TC3Credentials,
        tc3_request: SigningRequest,
        signing_properties: TC3SigningProperties,
        missing: str,
    ) -> None:
        properties = {k: v for k, v in signing_properties.items() if k != missing}
        with pytest.raises(MissingExpectedParameterException):
            self.TC3_SIGNER.sign(
                signing_properties=properties,  # type: ignore
                http_request=tc3_request,
                identity=tc3_identity,
            )

    def test_sign_without_host(
        self,
        tc3_identity: TC3Credentials,
        signing_properties: TC3SigningProperties,
    ) -> None:
        with pytest.raises(MissingExpectedParameterException):
            self.TC3_SIGNER.sign(
                signing_properties=signing_properties,
                http_request=SigningRequest(method="POST", host="", body=PAYLOAD),
                identity=tc3_identity,
            )

    def test_sign_doesnt_modify_original_request(
        self,
        tc3_identity: TC3Credentials,
        tc3_request: SigningRequest,
        signing_properties: TC3SigningProperties,
    ) -> None:
        original_request = copy.deepcopy(tc3_request)
        signed_request = self.TC3_SIGNER.sign(
            signing_properties=signing_properties,
            http_request=tc3_request,
            identity=tc3_identity,
        )
        assert signed_request is not tc3_request
        assert tc3_request.fields == original_request.fields
        assert signed_request.fields != tc3_request.fields

    @typing.no_type_check
    def test_sign_with_invalid_identity(
        self, tc3_request: SigningRequest, signing_properties: TC3SigningProperties
    ) -> None:
        """Ignore typing as we're testing an invalid input state."""
        identity = object()
        assert not isinstance(identity, TC3Credentials)
        with pytest.raises(ValueError):
            self.TC3_SIGNER.sign(
                signing_properties=signing_properties,
                http_request=tc3_request,
                identity=identity,
            )

    def test_sign_with_expired_identity(
        self, tc3_request: SigningRequest, signing_properties: TC3SigningProperties
    ) -> None:
        identity = TC3Credentials(
            secret_id=SECRET_ID,
            secret_key=SECRET_KEY,
            expiration=datetime(1970, 1, 1, tzinfo=UTC),
        )
        with pytest.raises(ValueError):
            self.TC3_SIGNER.sign(
                signing_properties=signing_properties,
                http_request=tc3_request,
                identity=identity,
            )


@pytest.mark.parametrize(
    "timestamp,expected",
    [
        (0, "1970-01-01"),
        (1700000000, "2023-11-14"),
        # 23:59:59 UTC stays on the same date regardless of local time.
        (1704153599, "2024-01-01"),
    ],
)
def test_tc3_date(timestamp: int, expected: str) -> None:
    assert tc3_date(timestamp) == expected
