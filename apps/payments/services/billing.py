"""Billing portal and payment history."""

import logging
from typing import Optional

from django.conf import settings

from apps.accounts.models import User
from apps.payments import stripe_gateway
from apps.payments.stripe_gateway import get_field

logger = logging.getLogger(__name__)

RECEIPT_CHARGE_LIMIT = 10
RECEIPT_SUBSCRIPTION_LIMIT = 5


def create_portal_url(*, user: User, redirect_url: Optional[str] = None) -> str:
    customer_id = stripe_gateway.ensure_customer(user)
    return_url = redirect_url or f'{settings.APP_URL}/account/billing'
    portal = stripe_gateway.create_portal_session(customer_id=customer_id, return_url=return_url)
    logger.info("Billing portal session created", extra={'user_id': str(user.id)})
    return portal['url']


def _serialize_charge(charge) -> dict:
    return {
        'id': charge['id'],
        'amount_cents': charge['amount'],
        'currency': charge['currency'],
        'description': get_field(charge, 'description'),
        'created': charge['created'],
        'receipt_url': get_field(charge, 'receipt_url'),
        'status': charge['status'],
    }


def _serialize_subscription(subscription) -> dict:
    period_end = get_field(subscription, 'current_period_end')
    if period_end is None:
        items = get_field(get_field(subscription, 'items', {}), 'data', [])
        period_end = get_field(items[0], 'current_period_end') if items else None
    return {
        'id': subscription['id'],
        'status': subscription['status'],
        'created': subscription['created'],
        'cancel_at_period_end': get_field(subscription, 'cancel_at_period_end', False),
        'current_period_end': period_end,
    }


def get_receipts(*, user: User) -> dict:
    """Recent charges and subscriptions; empty for members never billed."""
    if not user.stripe_customer_id:
        return {
            'charges': [],
            'subscriptions': [],
            'customerEmailFallback': bool(user.email),
        }

    charges = stripe_gateway.list_charges(user.stripe_customer_id, limit=RECEIPT_CHARGE_LIMIT)
    subscriptions = stripe_gateway.list_subscriptions(user.stripe_customer_id, limit=RECEIPT_SUBSCRIPTION_LIMIT)
    return {
        'charges': [_serialize_charge(charge) for charge in charges],
        'subscriptions': [_serialize_subscription(sub) for sub in subscriptions],
    }
