# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class DNSSignerWarning(UserWarning): ...


class BaseDNSSignerException(Exception):
    """Top-level exception to capture signer-related errors."""


class MissingExpectedParameterException(BaseDNSSignerException, ValueError):
    """A request target or signing property required by the scheme is absent."""


class InvalidSigningInputError(BaseDNSSignerException, ValueError):
    """The request description can't be expressed in the vendor's canonical form."""


class CredentialsNotFoundError(BaseDNSSignerException):
    """Credentials could not be resolved from the configured source."""
