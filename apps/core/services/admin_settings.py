"""Runtime-tunable pricing and discount settings."""

import copy
import logging

from django.db import transaction

from apps.accounts.models import User
from apps.accounts.tiers import (
    PAID_TIERS,
    EXTENSION_PRICE_CENTS,
    SECOND_DATE_PRICE_CENTS,
    get_tier_limits,
)
from apps.core.models import AdminSettings

from .exceptions import InvalidSettingError

logger = logging.getLogger(__name__)


def default_pricing() -> dict:
    return {
        'tiers': {
            str(tier): {
                'minutes': get_tier_limits(tier).chat_minutes,
                'price_cents': get_tier_limits(tier).price_cents,
            }
            for tier in PAID_TIERS
        },
        'extension_cents': EXTENSION_PRICE_CENTS,
        'second_date_cents': SECOND_DATE_PRICE_CENTS,
    }


DEFAULTS = {
    AdminSettings.PRICING: default_pricing,
    AdminSettings.DISCOUNT_TOGGLES: dict,
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_setting(key: str) -> dict:
    """Return a setting with stored values layered over the defaults."""
    if key not in DEFAULTS:
        raise InvalidSettingError(f"Unknown setting: {key}")

    stored = AdminSettings.objects.filter(key=key).values_list('value', flat=True).first()
    return _merge(DEFAULTS[key](), stored or {})


def get_pricing() -> dict:
    return get_setting(AdminSettings.PRICING)


def get_all_settings() -> dict:
    return {key: get_setting(key) for key in DEFAULTS}


@transaction.atomic
def update_settings(*, updates: dict, updated_by: User) -> dict:
    """
    Replace the stored value of each key in ``updates``.

    Args:
        updates: Mapping of setting key to its new value
        updated_by: Admin making the change

    Returns:
        All settings after the update

    Raises:
        InvalidSettingError: If a key is unknown or a value is not an object
    """
    for key, value in updates.items():
        if key not in DEFAULTS:
            raise InvalidSettingError(f"Unknown setting: {key}")
        if not isinstance(value, dict):
            raise InvalidSettingError(f"Setting {key} must be an object")

    for key, value in updates.items():
        AdminSettings.objects.update_or_create(
            key=key,
            defaults={'value': value, 'updated_by': updated_by},
        )

    logger.info(
        'Admin settings updated',
        extra={'admin_id': str(updated_by.id), 'keys': sorted(updates)}
    )
    return get_all_settings()
