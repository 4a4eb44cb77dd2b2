"""Trusted citation domains and hostname classification.

Each entry is a domain suffix: ``si.edu`` matches ``si.edu`` itself and any
subdomain such as ``americanart.si.edu``. Matching is exact (lowercased), so a
look-alike host that is not listed never earns museum/academic credit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Tuple
from urllib.parse import urlsplit


ENCYCLOPEDIA_DOMAINS: Tuple[str, ...] = (
    "en.wikipedia.org",
    "britannica.com",
)

JOURNAL_DOMAINS: Tuple[str, ...] = (
    "nature.com",
    "science.org",
    "nejm.org",
    "thelancet.com",
    "cell.com",
    "pnas.org",
    "pubmed.ncbi.nlm.nih.gov",
    "ncbi.nlm.nih.gov",
    "jstor.org",
)

MUSEUM_DOMAINS: Tuple[str, ...] = (
    "britishmuseum.org",
    "metmuseum.org",
    "louvre.fr",
    "rijksmuseum.nl",
    "museodelprado.es",
    "vam.ac.uk",
    "tate.org.uk",
    "moma.org",
    "guggenheim.org",
    "getty.edu",
    "nga.gov",
    "npg.org.uk",
    "ashmolean.org",
    "smb.museum",
    "musee-orsay.fr",
    "centrepompidou.fr",
    "si.edu",
    "americanart.si.edu",
    "asia.si.edu",
    "nmaahc.si.edu",
    "airandspace.si.edu",
    "naturalhistory.si.edu",
)

UNIVERSITY_DOMAINS: Tuple[str, ...] = (
    "harvard.edu",
    "stanford.edu",
    "mit.edu",
    "ox.ac.uk",
    "cam.ac.uk",
    "ucl.ac.uk",
    "columbia.edu",
    "uchicago.edu",
    "yale.edu",
    "princeton.edu",
    "berkeley.edu",
    "utoronto.ca",
    "ethz.ch",
    "epfl.ch",
)

# Display order used by the prompt builder.
DOMAIN_GROUPS: Dict[str, Tuple[str, ...]] = {
    "Encyclopedia": ENCYCLOPEDIA_DOMAINS,
    "Journals/Databases": JOURNAL_DOMAINS,
    "Museums": MUSEUM_DOMAINS,
    "Universities": UNIVERSITY_DOMAINS,
}

MUSEUM_HOSTS: FrozenSet[str] = frozenset(MUSEUM_DOMAINS)
ACADEMIC_HOSTS: FrozenSet[str] = frozenset(JOURNAL_DOMAINS + UNIVERSITY_DOMAINS)
ALLOWED_HOSTS: FrozenSet[str] = frozenset(
    domain for group in DOMAIN_GROUPS.values() for domain in group
)


@dataclass(frozen=True)
class HostClassification:
    is_museum: bool = False
    is_academic: bool = False
    is_allowed: bool = False


NOT_ALLOWED = HostClassification()


def has_ambiguous_chars(url: str) -> bool:
    """True when ``url`` holds characters that browsers and ``urlsplit`` read differently.

    Browsers treat ``\\`` as a path separator in http(s) URLs, so
    ``https://evil.com\\@museum.org/x`` opens ``evil.com`` while ``urlsplit``
    reports ``museum.org``. Whitespace and control characters are likewise
    stripped or rewritten by browsers before parsing.
    """
    return any(ch == "\\" or ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url)


def host_matches(host: str | None, domain: str) -> bool:
    """True when ``host`` equals ``domain`` or is one of its subdomains."""
    h = (host or "").lower()
    d = domain.lower()
    return h == d or h.endswith("." + d)


def _matches_any(host: str, domains: Iterable[str]) -> bool:
    return any(host_matches(host, d) for d in domains)


def classify(hostname: str | None) -> HostClassification:
    host = (hostname or "").strip().lower()
    if not host:
        return NOT_ALLOWED
    return HostClassification(
        is_museum=_matches_any(host, MUSEUM_HOSTS),
        is_academic=_matches_any(host, ACADEMIC_HOSTS),
        is_allowed=_matches_any(host, ALLOWED_HOSTS),
    )


def classify_url(url: object) -> HostClassification:
    """Classify the host of ``url``; unparsable input is never allowed."""
    if not isinstance(url, str):
        return NOT_ALLOWED
    s = url.strip()
    if has_ambiguous_chars(s):
        return NOT_ALLOWED
    try:
        hostname = urlsplit(s).hostname
    except ValueError:
        return NOT_ALLOWED
    return classify(hostname)
