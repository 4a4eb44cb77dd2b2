from __future__ import annotations

import pytest

from facts.validation.urls import is_allowed_url


@pytest.mark.parametrize(
    "url",
    [
        "https://en.wikipedia.org/wiki/Cat",
        "  https://www.metmuseum.org/art/collection/search/544227  ",
        "https://americanart.si.edu/artwork/cat-12345",
        "https://www.jstor.org/stable/4629621?seq=1",
    ],
)
def test_allowed_urls(url):
    assert is_allowed_url(url) is True


@pytest.mark.parametrize(
    "url",
    [
        "https://evil.com/wiki/Cat",
        "https://en.wikipedia.org/",
        "https://en.wikipedia.org",
        "http://en.wikipedia.org/wiki/Cat",
        "//en.wikipedia.org/wiki/Cat",
        "en.wikipedia.org/wiki/Cat",
        "HTTPS://en.wikipedia.org/wiki/Cat",
        "https://bit.ly/abc123",
        "https://t.co/xyz",
        "https://en.wikipedia.org@evil.com/wiki/Cat",
        "https:///wiki/Cat",
        "https://[::1/wiki",
        "https://evil.com\\@www.metmuseum.org/art/collection/search/1",
        "https://www.metmuseum.org\\art/collection",
        "https://en.wikipedia.org/wiki/Cat Dog",
        "https://en.wikipedia.org/wiki/\tCat",
        "https://en.wikipedia.org/wiki/Cat\x00",
        "",
    ],
)
def test_rejected_urls(url):
    assert is_allowed_url(url) is False


@pytest.mark.parametrize("value", [None, 123, ["https://en.wikipedia.org/wiki/Cat"], {"url": "x"}])
def test_non_string_input_is_rejected_without_raising(value):
    assert is_allowed_url(value) is False
