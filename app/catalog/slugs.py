# app/catalog/slugs.py
import re
import unicodedata

_DISALLOWED = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def generate_slug(name: str | None, volume_number: int | str | None = None) -> str:
    """
    Build a URL-safe slug from a title and optional volume number.

      - lowercase, accents folded to ASCII ("Café" -> "cafe")
      - drop anything that is not a word char, whitespace or hyphen
      - whitespace runs -> '-'
      - collapse multiple '-'
      - strip leading/trailing '-'
      - append '-vol-<n>' when a volume number is given

    Examples:
        generate_slug("The Last Saiyan!!", 3) -> "the-last-saiyan-vol-3"
        generate_slug("") -> ""

    A name with nothing sluggable yields "" even with a volume number
    (never "-vol-2"); callers reject the empty slug with a 400.
    """
    if not name:
        return ""

    value = unicodedata.normalize("NFKD", name.strip().lower())
    value = value.encode("ascii", "ignore").decode("ascii")
    value = _DISALLOWED.sub("", value)
    value = _WHITESPACE.sub("-", value)
    value = _HYPHENS.sub("-", value)
    value = value.strip("-")

    if value and volume_number:
        value = f"{value}-vol-{volume_number}"
    return value
