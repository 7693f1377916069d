# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for secret value decoders."""

from __future__ import annotations

import base64

import pytest

from secretsync.backends.decoder import (
    Base64Decoder,
    TextDecoder,
    resolve_decoder,
    supported_encodings,
)
from secretsync.enums import EnumSyncErrorCode, EnumSyncTransportType
from secretsync.errors import DecodeError, UnsupportedEncodingError


class TestResolveDecoder:
    """Test decoder selection by encoding name."""

    def test_empty_name_is_text(self) -> None:
        assert isinstance(resolve_decoder(""), TextDecoder)

    def test_text(self) -> None:
        assert isinstance(resolve_decoder("text"), TextDecoder)

    def test_base64(self) -> None:
        assert isinstance(resolve_decoder("base64"), Base64Decoder)

    def test_unknown_encoding_raises(self) -> None:
        with pytest.raises(UnsupportedEncodingError) as exc_info:
            resolve_decoder("hex")

        error = exc_info.value
        assert error.encoding == "hex"
        assert error.error_code == EnumSyncErrorCode.UNSUPPORTED_ENCODING
        assert error.transport_type == EnumSyncTransportType.BACKEND

    def test_names_are_case_sensitive(self) -> None:
        with pytest.raises(UnsupportedEncodingError):
            resolve_decoder("Base64")

    def test_supported_encodings(self) -> None:
        assert supported_encodings() == ["base64", "text"]


class TestTextDecoder:
    """Test the pass-through decoder."""

    def test_utf8_bytes(self) -> None:
        assert TextDecoder().decode("hello") == b"hello"

    def test_non_ascii(self) -> None:
        assert TextDecoder().decode("héllo") == "héllo".encode()

    def test_empty(self) -> None:
        assert TextDecoder().decode("") == b""


class TestBase64Decoder:
    """Test the strict base64 decoder."""

    def test_decode(self) -> None:
        assert Base64Decoder().decode("aGVsbG8=") == b"hello"

    def test_binary_payload(self) -> None:
        assert Base64Decoder().decode("AP8=") == b"\x00\xff"

    def test_empty(self) -> None:
        assert Base64Decoder().decode("") == b""

    def test_trailing_newline_is_skipped(self) -> None:
        assert Base64Decoder().decode("aGVsbG8=\n") == b"hello"

    def test_line_wrapped_value(self) -> None:
        payload = b"-----BEGIN CERTIFICATE-----" + bytes(range(256))
        wrapped = base64.encodebytes(payload).decode()

        assert "\n" in wrapped.rstrip("\n")
        assert Base64Decoder().decode(wrapped) == payload

    def test_crlf_wrapped_value(self) -> None:
        assert Base64Decoder().decode("aGVs\r\nbG8=\r\n") == b"hello"

    @pytest.mark.parametrize(
        "encoded",
        [
            "aGVsbG8=",
            "AP8=",
            "",
            base64.b64encode(bytes(range(256))).decode(),
            base64.b64encode(b"user:p\xc3\xa4ss\nline2").decode(),
        ],
    )
    def test_reencoding_yields_original(self, encoded: str) -> None:
        assert base64.b64encode(Base64Decoder().decode(encoded)).decode() == encoded

    def test_reencoding_wrapped_value_yields_unwrapped_original(self) -> None:
        wrapped = base64.encodebytes(b"x" * 100).decode()

        decoded = Base64Decoder().decode(wrapped)

        assert base64.b64encode(decoded).decode() == wrapped.replace("\n", "")

    @pytest.mark.parametrize(
        "raw",
        [
            "not base64!",
            "aGVsbG8",  # missing padding
            "aGV sbG8=",
            "aGVsbG8=\t",
        ],
    )
    def test_invalid_input_raises_decode_error(self, raw: str) -> None:
        with pytest.raises(DecodeError) as exc_info:
            Base64Decoder().decode(raw)

        assert exc_info.value.error_code == EnumSyncErrorCode.DECODE_ERROR
        assert exc_info.value.context["encoding"] == "base64"

    def test_decode_error_chains_cause(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            Base64Decoder().decode("@@@@")

        assert exc_info.value.__cause__ is not None
