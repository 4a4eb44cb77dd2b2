from __future__ import annotations

import pytest

from facts.validation.domains import (
    ACADEMIC_HOSTS,
    ALLOWED_HOSTS,
    MUSEUM_HOSTS,
    NOT_ALLOWED,
    classify,
    classify_url,
    host_matches,
)


def test_host_matches_exact_and_subdomain():
    assert host_matches("si.edu", "si.edu")
    assert host_matches("americanart.si.edu", "si.edu")
    assert host_matches("WWW.Louvre.FR", "louvre.fr")
    assert not host_matches("notsi.edu", "si.edu")
    assert not host_matches("si.edu.evil.com", "si.edu")
    assert not host_matches(None, "si.edu")


def test_classify_museum_and_academic():
    museum = classify("www.britishmuseum.org")
    assert museum.is_allowed and museum.is_museum and not museum.is_academic

    academic = classify("pubmed.ncbi.nlm.nih.gov")
    assert academic.is_allowed and academic.is_academic and not academic.is_museum

    uni = classify("news.mit.edu")
    assert uni.is_academic


def test_encyclopedia_is_allowed_without_credit():
    wiki = classify("en.wikipedia.org")
    assert wiki.is_allowed
    assert not wiki.is_museum
    assert not wiki.is_academic


@pytest.mark.parametrize(
    "host",
    ["evil.com", "metmuseum.org.evil.com", "rnetmuseum.org", "de.wikipedia.org", ""],
)
def test_unlisted_hosts_are_not_allowed(host):
    assert classify(host).is_allowed is False


def test_category_sets_are_subsets_of_allowlist():
    assert MUSEUM_HOSTS <= ALLOWED_HOSTS
    assert ACADEMIC_HOSTS <= ALLOWED_HOSTS
    assert not MUSEUM_HOSTS & ACADEMIC_HOSTS


def test_classify_url_handles_garbage():
    assert classify_url("https://www.moma.org/collection/works/79802").is_museum
    assert classify_url(42).is_allowed is False
    assert classify_url("https://[not-an-ip/x").is_allowed is False


def test_classify_url_refuses_backslash_authority_tricks():
    assert classify_url("https://evil.com\\@www.metmuseum.org/art/collection/search/1") == NOT_ALLOWED
    assert classify_url("https://www.nature.com/articles/x\r\n") == classify_url("https://www.nature.com/articles/x")
    assert classify_url("https://www.nature.com/arti cles/x").is_academic is False
