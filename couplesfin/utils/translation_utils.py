"""
Localization helpers.

Uses Babel for locale data with automatic fallback to Brazilian Portuguese,
the language of the application's users.
"""

import structlog
from babel import Locale, UnknownLocaleError

from couplesfin.utils.cache_utils import get_ttl_cache

logger = structlog.get_logger(__name__)

FALLBACK_LOCALE = "pt_BR"

_locale_cache = get_ttl_cache("babel_locales", maxsize=32, ttl=24 * 3600)


def get_babel_locale(language: str) -> Locale:
    """
    Get Babel Locale object for a language or locale identifier.
    Falls back to pt_BR if the identifier is not supported.

    Args:
        language: 'pt', 'pt_BR', 'pt-BR', 'en_US', ...

    Examples:
        >>> get_babel_locale('pt-BR').territory
        'BR'
        >>> get_babel_locale('invalid_lang').language  # Falls back to 'pt'
        'pt'
    """
    key = (language or FALLBACK_LOCALE).replace("-", "_")
    locale = _locale_cache.get(key)
    if locale is not None:
        return locale

    try:
        locale = Locale.parse(key)
    except (ValueError, UnknownLocaleError) as e:
        logger.warning("Locale not supported, falling back", language=language, fallback=FALLBACK_LOCALE, error=str(e))
        locale = Locale.parse(FALLBACK_LOCALE)

    _locale_cache[key] = locale
    return locale
