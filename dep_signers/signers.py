# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
import hmac
import logging
from dataclasses import dataclass
from hashlib import sha256
from typing import Final, Required, TypedDict

from .exceptions import MissingExpectedParameterException

logger: Final = logging.getLogger(__name__)

SIGV4_TIMESTAMP_FORMAT: str = "%Y%m%dT%H%M%SZ"
SIGV4_DATE_FORMAT: str = "%Y%m%d"
SIGNING_ALGORITHM: str = "AWS4-HMAC-SHA256"
SIGNED_HEADERS: str = "host;x-amz-date"
DEFAULT_REGION: str = "eu-west-1"
DEFAULT_SERVICE: str = "execute-api"
SECRET_KEY_PREFIX: str = "AWS4"
SCOPE_TERMINATOR: str = "aws4_request"


class SigningProperties(TypedDict, total=False):
    region: Required[str]
    service: Required[str]
    date: str


@dataclass(frozen=True)
class SigningResult:
    """The outcome of a single signing operation."""

    signature: str
    """Lower-case hex encoded HMAC-SHA256 signature."""

    credential_scope: str
    """Scope of the signing key, ``<YYYYMMDD>/<region>/<service>/aws4_request``."""


class SigningEngine:
    """Computes Signature Version 4 style signatures for DEP platform requests.

    Only the ``host`` and ``x-amz-date`` headers are signed. The host header line is
    supplied by the caller already prefixed with ``host:``.
    """

    def sign(
        self,
        *,
        secret: str,
        http_method: str,
        request_path: str,
        host_name: str,
        query_string: str = "",
        body: str = "",
        signing_properties: SigningProperties,
    ) -> SigningResult:
        """Generate the signature and credential scope for a request.

        :param secret: The access secret the signing key is derived from.
        :param http_method: Upper-case HTTP method name.
        :param request_path: Absolute path of the request.
        :param host_name: The host header line, e.g. ``host:api.example.com``.
        :param query_string: Canonical, encoded query string. Empty if none.
        :param body: Request body text. Empty if none.
        :param signing_properties: SigningProperties to define the region, service
            and date to sign with. The current UTC time is used if no date is set.
        """
        new_signing_properties = self._normalize_signing_properties(
            signing_properties=signing_properties
        )
        canonical_request = self.canonical_request(
            http_method=http_method,
            request_path=request_path,
            query_string=query_string,
            host_name=host_name,
            body=body,
            signing_properties=new_signing_properties,
        )
        string_to_sign = self.string_to_sign(
            canonical_request=canonical_request,
            signing_properties=new_signing_properties,
        )
        signing_key = self.signing_key(
            secret=secret, signing_properties=new_signing_properties
        )
        return SigningResult(
            signature=self.signature(
                string_to_sign=string_to_sign, signing_key=signing_key
            ),
            credential_scope=self.credential_scope(
                signing_properties=new_signing_properties
            ),
        )

    def canonical_request(
        self,
        *,
        http_method: str,
        request_path: str,
        query_string: str,
        host_name: str,
        body: str,
        signing_properties: SigningProperties,
    ) -> str:
        """The canonical request is a standardized string laying out the components
        used in the signing algorithm. Comparing it against the server's view is the
        quickest way to find the cause of a signature mismatch.

        The canonical request is defined as:
            <HTTPMethod>\\n
            <RequestPath>\\n
            <CanonicalQueryString>\\n
            host:<HostName>\\n
            x-amz-date:<Timestamp>\\n
            \\n
            host;x-amz-date\\n
            <HashedPayload>

        The empty line terminates the canonical header block.
        """
        timestamp = self._date(signing_properties=signing_properties)
        canonical_request = (
            f"{http_method}\n"
            f"{request_path}\n"
            f"{query_string}\n"
            f"{host_name}\n"
            f"x-amz-date:{timestamp}\n"
            "\n"
            f"{SIGNED_HEADERS}\n"
            f"{sha256(body.encode('utf-8')).hexdigest()}"
        )
        logger.debug("Canonical request:\n%s", canonical_request)
        return canonical_request

    def string_to_sign(
        self, *, canonical_request: str, signing_properties: SigningProperties
    ) -> str:
        """The string to sign concatenates the algorithm identifier, the signing
        timestamp, the credential scope and a hash of the canonical request.

        The string to sign is defined as:
            Algorithm \\n
            RequestDateTime \\n
            CredentialScope \\n
            HashedCanonicalRequest
        """
        string_to_sign = (
            f"{SIGNING_ALGORITHM}\n"
            f"{self._date(signing_properties=signing_properties)}\n"
            f"{self.credential_scope(signing_properties=signing_properties)}\n"
            f"{sha256(canonical_request.encode('utf-8')).hexdigest()}"
        )
        logger.debug("String to sign:\n%s", string_to_sign)
        return string_to_sign

    def credential_scope(self, *, signing_properties: SigningProperties) -> str:
        formatted_date = self._date(signing_properties=signing_properties)[0:8]
        region = signing_properties["region"]
        service = signing_properties["service"]
        # Scope format: <YYYYMMDD>/<region>/<service>/aws4_request
        return f"{formatted_date}/{region}/{service}/{SCOPE_TERMINATOR}"

    def signing_key(
        self, *, secret: str, signing_properties: SigningProperties
    ) -> bytes:
        """Derive the signing key scoped to one day, region and service.

        DateKey              = HMAC-SHA256("AWS4"+"<Secret>", "<YYYYMMDD>")
        DateRegionKey        = HMAC-SHA256(<DateKey>, "<region>")
        DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<service>")
        SigningKey           = HMAC-SHA256(<DateRegionServiceKey>, "aws4_request")
        """
        scope_components = (
            self._date(signing_properties=signing_properties)[0:8],
            signing_properties["region"],
            signing_properties["service"],
            SCOPE_TERMINATOR,
        )
        key = f"{SECRET_KEY_PREFIX}{secret}".encode()
        for component in scope_components:
            key = self._hash(key=key, value=component)
        return key

    def signature(self, *, string_to_sign: str, signing_key: bytes) -> str:
        return self._hash(key=signing_key, value=string_to_sign).hex()

    def _hash(self, key: bytes, value: str) -> bytes:
        return hmac.new(key=key, msg=value.encode("utf-8"), digestmod=sha256).digest()

    def _date(self, *, signing_properties: SigningProperties) -> str:
        date = signing_properties.get("date")
        if date is None:
            raise MissingExpectedParameterException(
                "Cannot sign without a valid date in your signing_properties. "
                f"Current value: {date}"
            )
        return date

    def _normalize_signing_properties(
        self, *, signing_properties: SigningProperties
    ) -> SigningProperties:
        # Create copy of signing properties to avoid mutating the original
        new_signing_properties = SigningProperties(**signing_properties)
        if "date" not in new_signing_properties:
            date_obj = datetime.datetime.now(datetime.UTC)
            new_signing_properties["date"] = date_obj.strftime(SIGV4_TIMESTAMP_FORMAT)
        return new_signing_properties
