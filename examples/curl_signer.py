"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0

Sample signer that prints a curl command for a signed cloud DNS request.

    BAIDU_ACCESS_KEY=... BAIDU_SECRET_KEY=... python curl_signer.py
"""

import typing
from collections.abc import Mapping
from urllib.parse import parse_qs, urlparse

from cloud_dns_signers import BCESigner, BCESigningProperties, SigningRequest
from cloud_dns_signers.config import BCEEnvironmentCredentialsResolver

if typing.TYPE_CHECKING:
    from cloud_dns_signers import BCECredentials


class BCECurl:
    """Generates a curl command with a bce-auth-v1 signature applied."""

    signer = BCESigner()

    @classmethod
    def generate_signed_curl_cmd(
        cls,
        properties: BCESigningProperties,
        identity: "BCECredentials",
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None,
    ) -> str:
        url_parts = urlparse(url)
        request = SigningRequest(
            method=method,
            host=url_parts.hostname or "",
            path=url_parts.path,
            query=parse_qs(url_parts.query, keep_blank_values=True),
            fields=headers,
            body=body,
        )
        signed_request = cls.signer.sign(
            signing_properties=properties,
            http_request=request,
            identity=identity,
        )
        return cls._construct_curl_cmd(request=signed_request, url=url)

    @classmethod
    def _construct_curl_cmd(cls, request: SigningRequest, url: str) -> str:
        cmd_list = ["curl"]
        cmd_list.append(f"-X {request.method.upper()}")
        for header in request.fields:
            cmd_list.append(f'-H "{header.name}: {header.as_string()}"')
        if request.body:
            # Forcing bytes to a utf-8 string, if we need arbitrary bytes for the
            # terminal we should add an option to write to file and use that
            # in the command.
            body = request.body
            if isinstance(body, bytes):
                body = body.decode()
            cmd_list.append(f"-d '{body}'")
        cmd_list.append(f"'{url}'")
        return " ".join(cmd_list)


if __name__ == "__main__":
    print(
        BCECurl.generate_signed_curl_cmd(
            properties=BCESigningProperties(),
            identity=BCEEnvironmentCredentialsResolver().get_identity(),
            method="GET",
            url="https://dns.baidubce.com/v1/dns/zone?name=example.com",
            headers={"Content-Type": "application/json"},
            body=None,
        )
    )
