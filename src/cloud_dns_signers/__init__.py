# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Cloud DNS Signers computes the authentication headers required by the DNS APIs
of Baidu, Tencent (DNSPod), Volcengine, JDCloud and Huawei Cloud, for use with
HTTP tools such as AioHTTP, Curl, Requests, urllib3, etc."""

from __future__ import annotations

from ._http import Field, Fields, SigningRequest
from ._identity import (
    BCECredentials,
    HuaweiCredentials,
    JDCloudCredentials,
    TC3Credentials,
    VolcengineCredentials,
)
from .signers import (
    BCESigner,
    BCESigningProperties,
    HuaweiSigner,
    HuaweiSigningProperties,
    JDCloudSigner,
    JDCloudSigningProperties,
    TC3Signer,
    TC3SigningProperties,
    VolcengineSigner,
    VolcengineSigningProperties,
    generate_client_token,
)

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "BCECredentials",
    "BCESigner",
    "BCESigningProperties",
    "Field",
    "Fields",
    "HuaweiCredentials",
    "HuaweiSigner",
    "HuaweiSigningProperties",
    "JDCloudCredentials",
    "JDCloudSigner",
    "JDCloudSigningProperties",
    "SigningRequest",
    "TC3Credentials",
    "TC3Signer",
    "TC3SigningProperties",
    "VolcengineCredentials",
    "VolcengineSigner",
    "VolcengineSigningProperties",
    "generate_client_token",
)
