# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
from hashlib import sha256

import pytest
from dep_signers import SigningEngine, SigningProperties, SigningResult
from dep_signers.exceptions import MissingExpectedParameterException
from freezegun import freeze_time

SECRET: str = "TESTSECRET"
HOST: str = "host:api.dep.mtn.co.za"
DATE_STR: str = "20181022T125951Z"
EMPTY_SHA256_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

DELETE_CANONICAL_REQUEST: str = (
    "DELETE\n"
    "/subscription/50273440\n"
    "\n"
    "host:api.dep.mtn.co.za\n"
    "x-amz-date:20181022T125951Z\n"
    "\n"
    "host;x-amz-date\n"
    f"{EMPTY_SHA256_HASH}"
)


@pytest.fixture(scope="module")
def engine() -> SigningEngine:
    return SigningEngine()


@pytest.fixture(scope="module")
def signing_properties() -> SigningProperties:
    return SigningProperties(region="eu-west-1", service="execute-api", date=DATE_STR)


def test_canonical_request(
    engine: SigningEngine, signing_properties: SigningProperties
) -> None:
    canonical_request = engine.canonical_request(
        http_method="DELETE",
        request_path="/subscription/50273440",
        query_string="",
        host_name=HOST,
        body="",
        signing_properties=signing_properties,
    )
    assert canonical_request == DELETE_CANONICAL_REQUEST
    assert (
        sha256(canonical_request.encode()).hexdigest()
        == "64205c144ea04bb437ccc8b9be26c101684ab9b9f82d4cabeeae6a13531e5dce"
    )


def test_canonical_request_hashes_body_and_includes_query(
    engine: SigningEngine, signing_properties: SigningProperties
) -> None:
    body = '{"one":"one"}'
    canonical_request = engine.canonical_request(
        http_method="PUT",
        request_path="/subscription",
        query_string="a=1&b=%20",
        host_name=HOST,
        body=body,
        signing_properties=signing_properties,
    )
    lines = canonical_request.split("\n")
    assert lines[:3] == ["PUT", "/subscription", "a=1&b=%20"]
    assert lines[-1] == sha256(body.encode("utf-8")).hexdigest()


def test_string_to_sign(
    engine: SigningEngine, signing_properties: SigningProperties
) -> None:
    string_to_sign = engine.string_to_sign(
        canonical_request=DELETE_CANONICAL_REQUEST,
        signing_properties=signing_properties,
    )
    assert string_to_sign == (
        "AWS4-HMAC-SHA256\n"
        "20181022T125951Z\n"
        "20181022/eu-west-1/execute-api/aws4_request\n"
        "64205c144ea04bb437ccc8b9be26c101684ab9b9f82d4cabeeae6a13531e5dce"
    )


def test_credential_scope(
    engine: SigningEngine, signing_properties: SigningProperties
) -> None:
    assert (
        engine.credential_scope(signing_properties=signing_properties)
        == "20181022/eu-west-1/execute-api/aws4_request"
    )


def test_signing_key(
    engine: SigningEngine, signing_properties: SigningProperties
) -> None:
    key = engine.signing_key(secret=SECRET, signing_properties=signing_properties)
    assert isinstance(key, bytes)
    assert (
        key.hex() == "87b696f569bb6f09e8f53ba44055af168b8eb86c961e3c4bb26de80df85caa5e"
    )


def test_signing_key_only_depends_on_the_date(engine: SigningEngine) -> None:
    morning = engine.signing_key(
        secret=SECRET,
        signing_properties=SigningProperties(
            region="eu-west-1", service="execute-api", date="20181022T000000Z"
        ),
    )
    evening = engine.signing_key(
        secret=SECRET,
        signing_properties=SigningProperties(
            region="eu-west-1", service="execute-api", date="20181022T235959Z"
        ),
    )
    assert morning == evening


def test_signature_is_lower_case_hex(
    engine: SigningEngine, signing_properties: SigningProperties
) -> None:
    key = engine.signing_key(secret=SECRET, signing_properties=signing_properties)
    signature = engine.signature(string_to_sign="value", signing_key=key)
    assert len(signature) == 64
    assert signature == signature.lower()
    int(signature, 16)


@pytest.mark.parametrize(
    "http_method, request_path, query_string, body, expected_signature",
    [
        (
            "DELETE",
            "/subscription/50273440",
            "",
            "",
            "b398ee70496cf3a43cc571431ea833090d58f20a0b1439109775d1e59c4106ca",
        ),
        (
            "POST",
            "/subscription",
            "",
            '{"one":"one"}',
            "e28d5a3de0973c0cd7cd5ce86a87157897f118ea85791f540819d0201771cd3b",
        ),
        (
            "PUT",
            "/subscription/50273440",
            "status=active",
            "",
            "8811f3c35562f7722f4bc68953554556fa8dc2d488eb0b9fcc3b8aa4d4ecc409",
        ),
    ],
)
def test_sign(
    engine: SigningEngine,
    signing_properties: SigningProperties,
    http_method: str,
    request_path: str,
    query_string: str,
    body: str,
    expected_signature: str,
) -> None:
    result = engine.sign(
        secret=SECRET,
        http_method=http_method,
        request_path=request_path,
        host_name=HOST,
        query_string=query_string,
        body=body,
        signing_properties=signing_properties,
    )
    assert result == SigningResult(
        signature=expected_signature,
        credential_scope="20181022/eu-west-1/execute-api/aws4_request",
    )


def test_sign_doesnt_modify_signing_properties(engine: SigningEngine) -> None:
    signing_properties = SigningProperties(region="eu-west-1", service="execute-api")
    with freeze_time("2018-10-22 12:59:51"):
        engine.sign(
            secret=SECRET,
            http_method="GET",
            request_path="/",
            host_name=HOST,
            signing_properties=signing_properties,
        )
    assert "date" not in signing_properties


@freeze_time("2018-10-22 12:59:51")
def test_sign_defaults_to_current_time(engine: SigningEngine) -> None:
    result = engine.sign(
        secret=SECRET,
        http_method="DELETE",
        request_path="/subscription/50273440",
        host_name=HOST,
        signing_properties=SigningProperties(region="eu-west-1", service="execute-api"),
    )
    assert result.credential_scope == "20181022/eu-west-1/execute-api/aws4_request"
    assert (
        result.signature
        == "b398ee70496cf3a43cc571431ea833090d58f20a0b1439109775d1e59c4106ca"
    )


def test_string_to_sign_without_date_raises(engine: SigningEngine) -> None:
    with pytest.raises(MissingExpectedParameterException):
        engine.string_to_sign(
            canonical_request=DELETE_CANONICAL_REQUEST,
            signing_properties=SigningProperties(
                region="eu-west-1", service="execute-api"
            ),
        )


def test_signing_steps_are_logged_without_secrets(
    engine: SigningEngine,
    signing_properties: SigningProperties,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.DEBUG, logger="dep_signers.signers"):
        engine.sign(
            secret=SECRET,
            http_method="DELETE",
            request_path="/subscription/50273440",
            host_name=HOST,
            signing_properties=signing_properties,
        )
    assert DELETE_CANONICAL_REQUEST in caplog.text
    assert "20181022/eu-west-1/execute-api/aws4_request" in caplog.text
    assert SECRET not in caplog.text
