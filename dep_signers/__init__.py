# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""DEP Signers generates the Authorization and X-Amz-Date headers required by the
DEP platform, for use with any HTTP client such as AioHTTP, Requests or urllib3."""

from __future__ import annotations

from ._query import QueryCanonicalizer
from ._request import HTTPMethod, SignerRequest
from .auth import RequestSigner, SignedHeaders
from .signers import SigningEngine, SigningProperties, SigningResult

__license__ = "Apache-2.0"
__version__ = "1.1.0"

__all__ = (
    "HTTPMethod",
    "QueryCanonicalizer",
    "RequestSigner",
    "SignedHeaders",
    "SignerRequest",
    "SigningEngine",
    "SigningProperties",
    "SigningResult",
)
