"""Currency rendering for display"""

from babel.numbers import format_currency as babel_format_currency

from financing_gateway.config import settings


def format_currency(value: float, currency: str | None = None, locale: str | None = None) -> str:
    """Render a monetary value in the configured locale (default: R$ 1.234,56)"""
    return babel_format_currency(
        value,
        currency or settings.currency_code,
        locale=locale or settings.currency_locale,
    )
