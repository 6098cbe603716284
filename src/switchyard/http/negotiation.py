"""Accept-header content negotiation.

Parses ``Accept`` into weighted media ranges and picks the best of a
set of offered types. Offers may be full MIME types (``application/json``)
or short names (``json``, ``html``) which are expanded through
:data:`SHORT_NAMES` and :mod:`mimetypes`.
"""

import mimetypes
from dataclasses import dataclass

SHORT_NAMES: dict[str, str] = {
    "html": "text/html",
    "text": "text/plain",
    "json": "application/json",
    "xml": "application/xml",
    "csv": "text/csv",
    "js": "application/javascript",
    "css": "text/css",
}


@dataclass(frozen=True, slots=True)
class MediaRange:
    """One entry of an Accept header, e.g. ``text/*;q=0.5``."""

    type: str
    subtype: str
    quality: float = 1.0
    order: int = 0

    @property
    def specificity(self) -> int:
        if self.type == "*":
            return 0
        if self.subtype == "*":
            return 1
        return 2

    def matches(self, mime: str) -> bool:
        main, _, sub = mime.partition("/")
        if self.type != "*" and self.type != main:
            return False
        return self.subtype == "*" or self.subtype == sub


def normalize_type(offer: str) -> str:
    """Expand a short name or extension to a MIME type (lowercased)."""
    if "/" in offer:
        return offer.split(";", 1)[0].strip().lower()
    key = offer.lstrip(".").lower()
    if key in SHORT_NAMES:
        return SHORT_NAMES[key]
    guessed, _ = mimetypes.guess_type(f"file.{key}")
    return guessed or "application/octet-stream"


def parse_accept(header: str | None) -> list[MediaRange]:
    """Parse an Accept header, most preferred first.

    A missing or empty header accepts everything (``*/*``). Malformed
    ranges are dropped; ``q=0`` ranges are kept so they can refuse a type.
    """
    if not header or not header.strip():
        return [MediaRange("*", "*")]

    ranges: list[MediaRange] = []
    for order, part in enumerate(header.split(",")):
        media, *params = (p.strip() for p in part.split(";"))
        if "/" not in media:
            continue
        main, _, sub = media.lower().partition("/")
        quality = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        ranges.append(MediaRange(main, sub or "*", quality, order))

    ranges.sort(key=lambda r: (-r.quality, -r.specificity, r.order))
    return ranges


def best_match(header: str | None, offers: list[str] | tuple[str, ...]) -> str | None:
    """Return the offer (as given) that the client prefers, or ``None``.

    Each offer takes the quality of the most specific range that matches
    it; ties go to the range listed first in the header, then to the
    earlier offer.
    """
    ranges = parse_accept(header)
    best: str | None = None
    best_key: tuple[float, int, int, int] | None = None

    for position, offer in enumerate(offers):
        mime = normalize_type(offer)
        candidates = [r for r in ranges if r.matches(mime)]
        if not candidates:
            continue
        chosen = max(candidates, key=lambda r: (r.specificity, r.quality))
        if chosen.quality <= 0:
            continue
        key = (chosen.quality, chosen.specificity, -chosen.order, -position)
        if best_key is None or key > best_key:
            best, best_key = offer, key

    return best
