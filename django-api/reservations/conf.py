"""App settings with their defaults."""

from django.conf import settings

DEFAULTS = {
    "RESERVATION_WINDOW_DAYS": 30,
    "WALK_IN_CUSTOMER_NAME": "Walk-in Customer",
    "GIFT_CODE_PREFIX": "GC",
    "GIFT_CODE_MAX_ATTEMPTS": 5,
    "GIFT_INSTRUMENTS_PAGE_SIZE": 20,
}


def get(name: str):
    return getattr(settings, name, DEFAULTS[name])
