"""Referral links - building with and without an origin, and parsing visits."""

import pytest

from cryptoex.referral.links import build_ref_link, extract_path, extract_ref_code


def test_link_resolves_landing_page_against_base():
    link = build_ref_link("ABCD2345", "https://demo.example/pages/account.html?tab=ref#top")
    assert link == "https://demo.example/pages/index.html?ref=ABCD2345"


def test_link_on_bare_origin():
    assert build_ref_link("ABCD2345", "https://demo.example") == "https://demo.example/index.html?ref=ABCD2345"


@pytest.mark.parametrize("base", [None, "", "null", "file:///home/me/site/index.html", "/relative/page"])
def test_link_without_usable_origin_is_relative(base):
    assert build_ref_link("ABCD2345", base) == "index.html?ref=ABCD2345"


def test_link_escapes_code():
    assert build_ref_link("a b&c", None) == "index.html?ref=a%20b%26c"


def test_empty_code_gives_empty_link():
    assert build_ref_link("  ", "https://demo.example") == ""


def test_extract_ref_code():
    assert extract_ref_code("https://demo.example/index.html?x=1&ref=ABCD2345") == "ABCD2345"
    assert extract_ref_code("https://demo.example/index.html?ref=") is None
    assert extract_ref_code("https://demo.example/index.html") is None


def test_extract_path():
    assert extract_path("https://demo.example/pages/rates.html?ref=X") == "/pages/rates.html"
