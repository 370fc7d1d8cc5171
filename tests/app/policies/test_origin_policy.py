"""Testes de normalização e matching de origem."""

from __future__ import annotations

import pytest

from app.policies import matches_origin, normalize_host


class TestNormalizeHost:
    """Testes de normalize_host."""

    @pytest.mark.parametrize(
        ("origin", "expected"),
        [
            ("https://Example.com", "example.com"),
            ("https://www.example.com", "example.com"),
            ("https://WWW.Example.COM:8443", "example.com"),
            ("http://a.b.example.com/path?q=1", "a.b.example.com"),
            ("https://wwwexample.com", "wwwexample.com"),
        ],
    )
    def test_extracts_lowercase_hostname(self, origin: str, expected: str) -> None:
        assert normalize_host(origin) == expected

    @pytest.mark.parametrize("origin", ["", None, "not a url", "null"])
    def test_unparseable_returns_empty(self, origin: str | None) -> None:
        """Origem ausente ou inválida vira string vazia."""
        assert normalize_host(origin) == ""


class TestMatchesOrigin:
    """Testes de matches_origin."""

    def test_empty_pattern_list_allows_any_host(self) -> None:
        assert matches_origin("anything.io", []) is True
        assert matches_origin("", []) is True

    def test_star_allows_any_host(self) -> None:
        assert matches_origin("evil.example", ["*"]) is True

    def test_exact_match(self) -> None:
        assert matches_origin("example.com", ["example.com"]) is True
        assert matches_origin("other.com", ["example.com"]) is False

    def test_wildcard_subdomain(self) -> None:
        """`*.example.com` casa subdomínios em qualquer nível, não o apex."""
        patterns = ["*.example.com"]
        assert matches_origin("a.example.com", patterns) is True
        assert matches_origin("a.b.example.com", patterns) is True
        assert matches_origin("example.com", patterns) is False

    def test_match_is_anchored(self) -> None:
        assert matches_origin("example.com.evil.io", ["example.com"]) is False
        assert matches_origin("notexample.com", ["example.com"]) is False

    def test_dots_are_literal(self) -> None:
        assert matches_origin("exampleXcom", ["example.com"]) is False

    def test_case_insensitive(self) -> None:
        assert matches_origin("example.com", ["Example.COM"]) is True

    def test_empty_host_rejected_by_specific_patterns(self) -> None:
        assert matches_origin("", ["example.com", "*.example.com"]) is False

    def test_any_pattern_matching_is_enough(self) -> None:
        assert matches_origin("b.io", ["a.io", "b.io"]) is True
