# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
# ruff: noqa: S101
from __future__ import annotations

import warnings
from dataclasses import dataclass
from datetime import UTC

from ._request import SignerRequest
from .exceptions import DEPSignerWarning
from .signers import (
    DEFAULT_REGION,
    DEFAULT_SERVICE,
    SIGNED_HEADERS,
    SIGNING_ALGORITHM,
    SIGV4_TIMESTAMP_FORMAT,
    SigningEngine,
    SigningProperties,
)


@dataclass(frozen=True)
class SignedHeaders:
    """The header values to attach to a request sent to the DEP platform."""

    authorization: str
    """Value of the ``Authorization`` header."""

    x_amz_date: str
    """Value of the ``X-Amz-Date`` header."""

    def as_dict(self) -> dict[str, str]:
        return {"Authorization": self.authorization, "X-Amz-Date": self.x_amz_date}


class RequestSigner:
    """Generates the ``Authorization`` and ``X-Amz-Date`` headers for a request.

    The signer is built from a validated :py:class:`SignerRequest` and holds no other
    state, so the same request always produces the same headers.
    """

    def __init__(
        self, request: SignerRequest, *, engine: SigningEngine | None = None
    ) -> None:
        self._request = request
        self._engine = engine if engine is not None else SigningEngine()

    @property
    def request(self) -> SignerRequest:
        return self._request

    @property
    def json_body(self) -> str | None:
        """The body to send with the request, exactly as it was signed."""
        return self._request.body

    def create_authentication_headers(self) -> SignedHeaders:
        """Sign the request and return the resulting header values."""
        request = self._request
        assert request.timestamp is not None
        assert request.access_key is not None
        assert request.access_secret is not None
        assert request.request_path is not None
        assert request.host_name is not None

        signing_time = request.timestamp.astimezone(UTC)
        amz_date = signing_time.strftime(SIGV4_TIMESTAMP_FORMAT)
        result = self._engine.sign(
            secret=request.access_secret,
            http_method=request.method.value,
            request_path=request.request_path,
            host_name=request.host_name,
            query_string=self._canonical_query_string(),
            body=request.body or "",
            signing_properties=SigningProperties(
                region=DEFAULT_REGION, service=DEFAULT_SERVICE, date=amz_date
            ),
        )
        authorization = (
            f"{SIGNING_ALGORITHM} "
            f"Credential={request.access_key}/{result.credential_scope}, "
            f"SignedHeaders={SIGNED_HEADERS}, Signature={result.signature}"
        )
        return SignedHeaders(authorization=authorization, x_amz_date=amz_date)

    def query_string(self) -> str:
        """Return the signed query parameters as a sorted, unencoded query string.

        Returns an empty string if the request has no query parameters.
        """
        canonicalizer = self._request.canonical_query
        if canonicalizer is None:
            return ""
        return canonicalizer.query_string(should_encode=False)

    def request_query_string(self) -> str | None:
        """Return the query string to send, formatted the same way it was signed.

        The pairs are sorted, and percent-encoded only if the request was built with
        ``should_url_encode``. Returns None if the request has no query parameters.
        """
        warnings.warn(
            "request_query_string is deprecated. Use the QueryCanonicalizer supplied "
            "with the request instead.",
            DEPSignerWarning,
            stacklevel=2,
        )
        canonicalizer = self._request.canonical_query
        if canonicalizer is None:
            return None
        return canonicalizer.query_string(self._request.should_url_encode)

    def _canonical_query_string(self) -> str:
        canonicalizer = self._request.canonical_query
        if canonicalizer is None:
            return ""
        return canonicalizer.query_string(should_encode=True)
