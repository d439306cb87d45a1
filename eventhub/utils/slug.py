# eventhub/utils/slug.py
import re
import unicodedata


def slugify(text: str, fallback: str = "event") -> str:
    """
    URL and filename friendly slug: ASCII, lowercase, hyphen separated.
    """
    # Transliterate unicode to ASCII (e.g., "Café" -> "Cafe")
    normalized = unicodedata.normalize("NFKD", text)
    slug = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug).strip("-")
    return slug or fallback
