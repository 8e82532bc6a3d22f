# File: tests/test_utils.py
import pytest

from seo_scout.utils import host_of, is_http_url, normalize_url, origin_of, remove_duplicates, resolve_link


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("HTTPS://Example.COM", "https://example.com/"),
        ("https://example.com:443/a", "https://example.com/a"),
        ("http://example.com:80/a", "http://example.com/a"),
        ("http://example.com:8080/a", "http://example.com:8080/a"),
        ("https://example.com/a#section", "https://example.com/a"),
        ("https://example.com/a?b=1&c=2", "https://example.com/a?b=1&c=2"),
        ("https://example.com/A/", "https://example.com/A/"),
        ("http://[::1]:8000/x", "http://[::1]:8000/x"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


def test_origin_and_host():
    assert origin_of("https://Example.com:8443/a/b?c") == "https://example.com:8443"
    assert origin_of("http://example.com:80/") == "http://example.com"
    assert host_of("https://Sub.Example.com/x") == "sub.example.com"
    assert host_of("/relative") == ""


def test_is_http_url():
    assert is_http_url("https://example.com")
    assert not is_http_url("mailto:me@example.com")
    assert not is_http_url("https://")


@pytest.mark.parametrize(
    "href,expected",
    [
        ("/b", "https://example.com/b"),
        ("c", "https://example.com/a/c"),
        ("../d#frag", "https://example.com/d"),
        ("https://other.com", "https://other.com/"),
        ("mailto:me@example.com", None),
        ("javascript:void(0)", None),
        ("http://[broken", None),
    ],
)
def test_resolve_link(href, expected):
    assert resolve_link("https://example.com/a/page", href) == expected


def test_remove_duplicates_keeps_order():
    assert remove_duplicates(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
