"""Garment and colour vocabularies used when mapping recognised concepts.

Closet items and products keep free-form ``type`` and ``color`` strings; this
module only provides the canonical labels the recognition mapping looks for,
plus the tag normalisation shared by every model.
"""

from typing import Dict, Iterable, List, Optional


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_")


GARMENT_TYPES: Dict[str, List[str]] = {
    "top": ["shirt", "t-shirt", "tee", "blouse", "polo", "sweater", "hoodie", "blazer", "top"],
    "bottom": ["jeans", "chinos", "trousers", "pants", "skirt", "shorts", "leggings"],
    "dress": ["dress", "gown", "jumpsuit"],
    "shoes": ["sneakers", "boots", "loafers", "heels", "sandals", "shoes"],
    "outerwear": ["coat", "jacket", "puffer", "trench", "parka", "cardigan"],
    "accessory": ["belt", "bag", "handbag", "hat", "cap", "scarf", "sunglasses", "watch"],
}

COLOR_MAP = {
    "navy blue": "navy",
    "navy": "navy",
    "light blue": "blue",
    "sky blue": "blue",
    "blue": "blue",
    "denim": "blue",
    "black": "black",
    "white": "white",
    "off white": "white",
    "cream": "beige",
    "beige": "beige",
    "tan": "beige",
    "brown": "brown",
    "gray": "gray",
    "grey": "gray",
    "green": "green",
    "olive": "green",
    "red": "red",
    "burgundy": "red",
    "pink": "pink",
    "purple": "purple",
    "yellow": "yellow",
    "orange": "orange",
}


def match_garment_type(concept: str) -> Optional[str]:
    """Return the garment type named by a recognised concept, if any."""

    key = concept.strip().lower()
    for garments in GARMENT_TYPES.values():
        if key in garments:
            return key
    return None


def match_color(concept: str) -> Optional[str]:
    """Return the canonical colour named by a recognised concept, if any."""

    key = concept.strip().lower()
    return COLOR_MAP.get(key)


def normalise_tags(values: Iterable[str]) -> List[str]:
    """Normalise and deduplicate free-form tags, dropping a leading ``#``."""

    normalised = []
    seen = set()
    for value in values:
        key = _normalize_key(str(value)).lstrip("#")
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


__all__ = [
    "COLOR_MAP",
    "GARMENT_TYPES",
    "match_color",
    "match_garment_type",
    "normalise_tags",
]
