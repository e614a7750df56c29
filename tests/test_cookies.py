"""Tests for velix.http.cookies — parse_cookies + SetCookie."""

import pytest

from velix.http.cookies import SetCookie, parse_cookies


class TestParseCookies:
    def test_empty_string(self) -> None:
        assert parse_cookies("") == {}

    def test_multiple_cookies(self) -> None:
        result = parse_cookies("session=abc; theme=dark; lang=en")
        assert result == {"session": "abc", "theme": "dark", "lang": "en"}

    def test_value_with_equals(self) -> None:
        """Values can contain '=' (e.g. base64)."""
        assert parse_cookies("token=abc=def=") == {"token": "abc=def="}

    def test_no_equals_ignored(self) -> None:
        assert parse_cookies("session=abc; broken; theme=dark") == {
            "session": "abc",
            "theme": "dark",
        }

    def test_first_occurrence_wins(self) -> None:
        assert parse_cookies("s=specific; s=general") == {"s": "specific"}

    def test_quotes_and_escapes_decoded(self) -> None:
        assert parse_cookies('a="quoted"; b=x%20y') == {"a": "quoted", "b": "x y"}

    def test_empty_name_skipped(self) -> None:
        assert parse_cookies("=orphan; k=v") == {"k": "v"}


class TestSetCookie:
    def test_minimal(self) -> None:
        header = SetCookie(name="session", value="abc").to_header_value()

        assert header.startswith("session=abc")
        assert "Path=/" in header
        assert "HttpOnly" in header
        assert "SameSite=lax" in header
        assert "Expires" not in header

    def test_expires_rendered_as_http_date(self) -> None:
        header = SetCookie(name="s", value="v", expires=0).to_header_value()
        assert "Expires=Thu, 01 Jan 1970 00:00:00 GMT" in header

    def test_all_options(self) -> None:
        header = SetCookie(
            name="s",
            value="v",
            max_age=60,
            path="/app",
            domain="example.com",
            secure=True,
            httponly=False,
            samesite="strict",
        ).to_header_value()

        assert header == "s=v; Max-Age=60; Path=/app; Domain=example.com; Secure; SameSite=strict"

    def test_value_escaped_and_read_back(self) -> None:
        header = SetCookie(name="greeting", value="héllo; world").to_header_value()
        pair = header.split("; ")[0]

        assert pair == "greeting=h%C3%A9llo%3B%20world"
        assert parse_cookies(pair) == {"greeting": "héllo; world"}

    def test_base64_value_unchanged(self) -> None:
        assert SetCookie(name="t", value="abc=def=").to_header_value().startswith("t=abc=def=;")

    def test_empty_samesite_omits_attribute(self) -> None:
        assert "SameSite" not in SetCookie(name="s", value="v", samesite="").to_header_value()

    def test_invalid_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid cookie name"):
            SetCookie(name="bad name", value="v")

    def test_unknown_samesite_rejected(self) -> None:
        with pytest.raises(ValueError, match="SameSite must be one of"):
            SetCookie(name="s", value="v", samesite="sometimes")

    def test_samesite_none_requires_secure(self) -> None:
        with pytest.raises(ValueError, match="must also be Secure"):
            SetCookie(name="s", value="v", samesite="None")
        assert "SameSite=None" in SetCookie(
            name="s", value="v", samesite="None", secure=True
        ).to_header_value()
