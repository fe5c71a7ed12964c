# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class DEPSignerWarning(UserWarning): ...


class BaseDEPSignerException(Exception):
    """Top-level exception to capture signer-related errors."""


class ValidationError(BaseDEPSignerException, ValueError):
    """A mandatory request field is missing or a cross-field rule is violated.

    Raised while a :py:class:`SignerRequest` is constructed, never during signing.
    """


class EncodingError(BaseDEPSignerException, ValueError):
    """A query parameter key or value can't be represented as UTF-8."""

    def __init__(
        self,
        message: str = (
            "Unable to encode query string: The character encoding is not supported."
        ),
    ) -> None:
        super().__init__(message)


class MissingExpectedParameterException(BaseDEPSignerException, ValueError):
    """A signing step requires a signing property that wasn't supplied."""
