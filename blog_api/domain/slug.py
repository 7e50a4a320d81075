"""URL-safe slug derivation shared by article titles and upload filenames."""

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def slugify(text: str) -> str:
    """Return a lower-cased, hyphen-separated ASCII slug.

    Accented Latin characters are transliterated to their base letter
    (``"Café"`` → ``"cafe"``); everything else that is not alphanumeric
    collapses into single hyphens.
    """
    ascii_text = (
        unicodedata.normalize("NFKD", text)
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    return _NON_ALNUM.sub("-", ascii_text).strip("-").lower()
