"""Citation URL checks."""

from __future__ import annotations

from urllib.parse import urlsplit

from facts.validation.domains import classify, has_ambiguous_chars


SHORTENER_HOSTS = frozenset({"bit.ly", "t.co", "tinyurl.com", "goo.gl"})


def is_allowed_url(candidate: object) -> bool:
    """Return True when ``candidate`` is an https link to a page on a trusted host.

    Checks run in order and stop at the first failure:

    1. must be a string (surrounding whitespace is ignored)
    2. must start with ``https://`` and hold no backslash, whitespace or
       control characters
    3. must parse with a hostname
    4. hostname must not be a link shortener
    5. path must point at a page, not the site root
    6. hostname must be on the allowlist

    Never raises.
    """
    if not isinstance(candidate, str):
        return False
    s = candidate.strip()
    if not s.startswith("https://") or has_ambiguous_chars(s):
        return False

    try:
        parts = urlsplit(s)
        host = (parts.hostname or "").lower()
    except ValueError:
        return False
    if not host:
        return False

    if host in SHORTENER_HOSTS:
        return False

    path = parts.path
    if not path or path == "/" or len(path) < 2:
        return False

    return classify(host).is_allowed
