from courseoverview.core.config import DEFAULT_LANG
from courseoverview.lang import en

_PACKS = {
    "en": en.STRINGS,
}


def get_string(identifier: str, component: str = "courseoverview", lang: str = DEFAULT_LANG) -> str:
    """Look up a localized string. Unknown languages fall back to English."""
    pack = _PACKS.get(lang, _PACKS["en"])
    return pack[component][identifier]
