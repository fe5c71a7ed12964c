# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
# ruff: noqa: S101
from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Final

from ._query import QueryCanonicalizer
from .exceptions import DEPSignerWarning, ValidationError

logger: Final = logging.getLogger(__name__)

HOST_PREFIX: str = "host:"


class HTTPMethod(Enum):
    """HTTP methods accepted by the DEP platform."""

    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    GET = "GET"
    DELETE = "DELETE"

    @property
    def requires_payload(self) -> bool:
        """Whether a body or query string must accompany the method."""
        return self in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH)


def _missing_field_message(field_name: str) -> str:
    return (
        f"No {field_name} provided. The {field_name} is a mandatory field and "
        "cannot be null."
    )


@dataclass(frozen=True, kw_only=True)
class SignerRequest:
    """A snapshot of everything needed to sign one request.

    The request is validated when it's constructed. An invalid combination of
    fields raises :py:class:`ValidationError` and no instance is returned.
    """

    access_key: str | None = None
    """The access key identifying the caller."""

    access_secret: str | None = None
    """The secret the signing key is derived from."""

    http_method: HTTPMethod | str | None = None
    """The HTTP method. Strings are converted to :py:class:`HTTPMethod`."""

    request_path: str | None = None
    """Absolute path of the endpoint being called, e.g. ``/subscription``."""

    host_name: str | None = None
    """The host name. Stored with a ``host:`` prefix."""

    timestamp: datetime | None = None
    """Timezone-aware time of the request."""

    body: str | None = None
    """The JSON body sent with the request, as text."""

    query_canonicalizer: QueryCanonicalizer | None = None
    """Query parameters sent with the request."""

    query_parameters: Mapping[str, object] | None = None
    """Query parameters as a mapping of key to value.

    Deprecated in favor of ``query_canonicalizer``.
    """

    should_url_encode: bool = False
    """Whether :py:meth:`RequestSigner.request_query_string` percent-encodes.

    Deprecated along with ``query_parameters``.
    """

    _canonical_query: QueryCanonicalizer | None = field(
        init=False, repr=False, compare=False, default=None
    )

    def __post_init__(self) -> None:
        self._validate_mandatory_fields()
        object.__setattr__(self, "http_method", _parse_method(self.http_method))
        self._validate_payload()

        assert self.host_name is not None
        if not self.host_name.startswith(HOST_PREFIX):
            object.__setattr__(self, "host_name", f"{HOST_PREFIX}{self.host_name}")

        if self.query_parameters is not None or self.should_url_encode:
            warnings.warn(
                "query_parameters and should_url_encode are deprecated. Supply a "
                "QueryCanonicalizer through query_canonicalizer instead.",
                DEPSignerWarning,
                stacklevel=3,
            )
        object.__setattr__(self, "_canonical_query", self._snapshot_query())

    def _snapshot_query(self) -> QueryCanonicalizer | None:
        # Copied so later changes to caller-owned inputs can't alter what's signed.
        if self.query_canonicalizer is not None:
            return QueryCanonicalizer(self.query_canonicalizer)
        if self.query_parameters:
            logger.debug(
                "Converting %d legacy query parameters to a QueryCanonicalizer.",
                len(self.query_parameters),
            )
            return QueryCanonicalizer(sorted(self.query_parameters.items()))
        return None

    @property
    def canonical_query(self) -> QueryCanonicalizer | None:
        """The query parameters that are signed and sent with the request.

        This is a copy of ``query_canonicalizer`` taken at construction, or, if none
        was supplied, the legacy ``query_parameters`` converted in key order.
        """
        return self._canonical_query

    def _validate_mandatory_fields(self) -> None:
        if not self.access_key:
            raise ValidationError(_missing_field_message("accessKey"))
        if not self.access_secret:
            raise ValidationError(_missing_field_message("accessSecret"))
        if not self.request_path:
            raise ValidationError(_missing_field_message("requestPath"))
        if not self.http_method:
            raise ValidationError(_missing_field_message("httpMethod"))
        if self.timestamp is None:
            raise ValidationError(_missing_field_message("timestamp"))
        if not self.host_name:
            raise ValidationError(_missing_field_message("hostName"))

    def _validate_payload(self) -> None:
        assert self.request_path is not None
        assert self.timestamp is not None
        if (
            self.method.requires_payload
            and self.body is None
            and self.query_parameters is None
            and self.query_canonicalizer is None
        ):
            raise ValidationError(
                "A JSON body or query string should be provided for HttpMethod "
                "types: POST, PUT, PATCH."
            )
        if not self.request_path.startswith("/"):
            raise ValidationError(
                f"Invalid requestPath: {self.request_path!r}. The requestPath must "
                "start with '/'."
            )
        if self.timestamp.tzinfo is None or self.timestamp.utcoffset() is None:
            raise ValidationError(
                f"Invalid timestamp: {self.timestamp.isoformat()}. The timestamp "
                "must be timezone-aware."
            )

    @property
    def method(self) -> HTTPMethod:
        """The validated HTTP method."""
        assert isinstance(self.http_method, HTTPMethod)
        return self.http_method


def _parse_method(value: HTTPMethod | str | None) -> HTTPMethod:
    if isinstance(value, HTTPMethod):
        return value
    try:
        return HTTPMethod(str(value).upper())
    except ValueError:
        allowed = ", ".join(member.value for member in HTTPMethod)
        raise ValidationError(
            f"Unsupported httpMethod: {value!r}. Expected one of: {allowed}."
        ) from None
