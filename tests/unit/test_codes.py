# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for code, username and invitation code hashing utilities."""

import re

import pytest

from schoolhub.utils.codes import (
    CodeHasher,
    generate_code,
    generate_username,
    is_base64_image,
)


class TestGenerateCode:
    """Tests for generate_code."""

    def test_default_length(self) -> None:
        assert re.fullmatch(r"[A-Z0-9]{8}", generate_code())

    def test_custom_length(self) -> None:
        assert len(generate_code(12)) == 12

    def test_codes_differ(self) -> None:
        assert len({generate_code() for _ in range(50)}) == 50

    def test_rejects_non_positive_length(self) -> None:
        with pytest.raises(ValueError):
            generate_code(0)


class TestGenerateUsername:
    """Tests for generate_username."""

    def test_slug_and_suffix(self) -> None:
        username = generate_username("Green Hills Academy!")

        assert re.fullmatch(r"greenhillsacademy-[a-z0-9]{6}", username)

    def test_long_names_are_truncated(self) -> None:
        username = generate_username("A" * 80)

        assert username.startswith("a" * 30 + "-")
        assert len(username) == 37

    def test_name_without_alphanumerics(self) -> None:
        assert generate_username("!!!").startswith("item-")


class TestIsBase64Image:
    """Tests for is_base64_image."""

    def test_data_uri(self) -> None:
        assert is_base64_image("data:image/png;base64,AAAA")

    @pytest.mark.parametrize("value", ["https://cdn.example.com/a.png", "", None, 42])
    def test_other_values(self, value) -> None:
        assert not is_base64_image(value)


class TestCodeHasher:
    """Tests for CodeHasher."""

    @pytest.fixture
    def hasher(self) -> CodeHasher:
        return CodeHasher(rounds=4)

    def test_hash_and_verify(self, hasher: CodeHasher) -> None:
        hashed = hasher.hash("K3Q9ZP2A")

        assert hashed != "K3Q9ZP2A"
        assert hasher.verify("K3Q9ZP2A", hashed)
        assert not hasher.verify("K3Q9ZP2B", hashed)

    def test_same_code_hashes_differently(self, hasher: CodeHasher) -> None:
        assert hasher.hash("K3Q9ZP2A") != hasher.hash("K3Q9ZP2A")

    def test_hash_rejects_empty_code(self, hasher: CodeHasher) -> None:
        with pytest.raises(ValueError):
            hasher.hash("")

    def test_verify_handles_missing_or_malformed_hash(self, hasher: CodeHasher) -> None:
        assert not hasher.verify("K3Q9ZP2A", None)
        assert not hasher.verify("K3Q9ZP2A", "not-a-bcrypt-hash")
        assert not hasher.verify("", "$2b$04$abcdefghijklmnopqrstuu")
