"""
Environment-driven feature flags.

A flag named ``PAYMENT_CHECKOUT`` is read from ``FEATURE_FLAG_PAYMENT_CHECKOUT``.
Flags default to enabled; only ``false`` or ``0`` switch a feature off.
"""

from decouple import config


class Feature:
    PAYMENT_CHECKOUT = 'PAYMENT_CHECKOUT'
    SCHEDULED_DOWNGRADES = 'SCHEDULED_DOWNGRADES'
    MESSAGE_CREDITS = 'MESSAGE_CREDITS'
    VIDEO_CALLS = 'VIDEO_CALLS'
    SAFETY_REPORTS = 'SAFETY_REPORTS'


DISABLED_VALUES = ('false', '0')


def is_feature_enabled(name: str) -> bool:
    value = config(f'FEATURE_FLAG_{name}', default='true')
    return str(value).strip().lower() not in DISABLED_VALUES
