# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from collections.abc import Iterable, Iterator
from urllib.parse import quote

from .exceptions import EncodingError


class QueryCanonicalizer:
    """Builds the canonical query string used for signing.

    Both the key and the value of each parameter are percent-encoded. Pairs are
    sorted by their encoded key, and by their encoded value when keys are equal. An
    unsorted form that preserves insertion order is available as well.

    Adding the same key and value twice keeps a single entry. The same key with
    different values keeps one entry per value.
    """

    def __init__(self, parameters: Iterable[tuple[str, object]] | None = None) -> None:
        # encoded "key=value" -> (key, value), in insertion order
        self._parameters: dict[str, tuple[str, str]] = {}
        if parameters is not None:
            for key, value in parameters:
                self.add_parameter(key, value)

    def add_parameter(self, key: str, value: object) -> None:
        """Associate a value with the given key in the query string.

        :param key: The parameter name, as it will be sent on the wire before
            encoding.
        :param value: The parameter value. Booleans become ``true`` or ``false``;
            other non-string values are converted with ``str()``.
        :raises EncodingError: If the key or value can't be encoded as UTF-8.
        """
        text_value = _to_text(value)
        encoded_pair = f"{_uri_encode(key)}={_uri_encode(text_value)}"
        self._parameters.setdefault(encoded_pair, (key, text_value))

    def query_string(self, should_encode: bool = True) -> str:
        """Return the query string sorted by key, then by value for duplicate keys.

        :param should_encode: Whether to return the percent-encoded pairs or the
            literal pairs as they were supplied.
        """
        return self._join(sorted(self._parameters), should_encode)

    def unsorted_query_string(self, should_encode: bool = True) -> str:
        """Return the query string in the order the parameters were added.

        :param should_encode: Whether to return the percent-encoded pairs or the
            literal pairs as they were supplied.
        """
        return self._join(self._parameters, should_encode)

    def _join(self, encoded_pairs: Iterable[str], should_encode: bool) -> str:
        if should_encode:
            return "&".join(encoded_pairs)
        return "&".join(
            "{}={}".format(*self._parameters[pair]) for pair in encoded_pairs
        )

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._parameters.values())

    def __len__(self) -> int:
        return len(self._parameters)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._parameters.values())!r})"


def _to_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _uri_encode(text: str) -> str:
    """Percent-encode everything except the RFC 3986 unreserved characters.

    Input is always treated as raw text: an existing escape such as ``%3D`` has its
    ``%`` escaped again rather than being decoded.
    """
    try:
        raw = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError() from e
    return quote(raw, safe="")
