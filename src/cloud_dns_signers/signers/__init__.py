# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""One signer per vendor.

The schemes look alike but differ in small, load-bearing ways (trailing
slashes, header allow-lists, encoded header values, key derivation seeds), so
each lives in its own module and shares only the primitives in ``_canonical``.
"""

from .bce import (
    BCEAuthorization,
    BCESigner,
    BCESigningProperties,
    generate_client_token,
)
from .huawei import HuaweiAuthorization, HuaweiSigner, HuaweiSigningProperties
from .jdcloud import JDCloudAuthorization, JDCloudSigner, JDCloudSigningProperties
from .tc3 import TC3Authorization, TC3Signer, TC3SigningProperties
from .volcengine import (
    VolcengineAuthorization,
    VolcengineSigner,
    VolcengineSigningProperties,
)

__all__ = (
    "BCEAuthorization",
    "BCESigner",
    "BCESigningProperties",
    "HuaweiAuthorization",
    "HuaweiSigner",
    "HuaweiSigningProperties",
    "JDCloudAuthorization",
    "JDCloudSigner",
    "JDCloudSigningProperties",
    "TC3Authorization",
    "TC3Signer",
    "TC3SigningProperties",
    "VolcengineAuthorization",
    "VolcengineSigner",
    "VolcengineSigningProperties",
    "generate_client_token",
)
