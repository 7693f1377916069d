# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret value decoders.

A data source names the encoding its backend value is stored in. Decoders
turn that raw string into the bytes written to the consumer store.

Supported encodings:
    - ``text`` (also the empty string): UTF-8 bytes of the value
    - ``base64``: standard alphabet with padding, strictly validated;
      CR and LF line breaks are skipped so wrapped values decode

Decoding is side-effect free and all-or-nothing: on invalid input
DecodeError is raised and no partial bytes are returned.
"""

from __future__ import annotations

import base64
import binascii
from typing import Protocol

from secretsync.errors import DecodeError, UnsupportedEncodingError

ENCODING_TEXT = "text"
ENCODING_BASE64 = "base64"
DEFAULT_ENCODING = ENCODING_TEXT


class Decoder(Protocol):
    """Turns a raw backend value into bytes."""

    name: str

    def decode(self, raw: str) -> bytes: ...


class TextDecoder:
    """Pass-through decoder."""

    name = ENCODING_TEXT

    def decode(self, raw: str) -> bytes:
        return raw.encode("utf-8")


class Base64Decoder:
    """Standard base64 decoder."""

    name = ENCODING_BASE64

    def decode(self, raw: str) -> bytes:
        """Decode a base64 string.

        Raises:
            DecodeError: If ``raw`` contains characters outside the standard
                alphabet (line breaks aside) or has incorrect padding.
        """
        unwrapped = raw.replace("\r", "").replace("\n", "")
        try:
            return base64.b64decode(unwrapped, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(
                "Value is not valid base64",
                encoding=ENCODING_BASE64,
            ) from e


_DECODERS: dict[str, Decoder] = {
    ENCODING_TEXT: TextDecoder(),
    ENCODING_BASE64: Base64Decoder(),
}


def resolve_decoder(encoding: str) -> Decoder:
    """Return the decoder for ``encoding``.

    An empty name resolves to the text decoder.

    Raises:
        UnsupportedEncodingError: If no decoder is registered for the name.
    """
    decoder = _DECODERS.get(encoding or DEFAULT_ENCODING)
    if decoder is None:
        raise UnsupportedEncodingError(encoding)
    return decoder


def supported_encodings() -> list[str]:
    """Names accepted by resolve_decoder, besides the empty string."""
    return sorted(_DECODERS)


__all__ = [
    "DEFAULT_ENCODING",
    "ENCODING_BASE64",
    "ENCODING_TEXT",
    "Base64Decoder",
    "Decoder",
    "TextDecoder",
    "resolve_decoder",
    "supported_encodings",
]
