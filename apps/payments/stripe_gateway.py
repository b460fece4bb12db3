"""
Thin wrapper around the Stripe SDK.

Every Stripe call in the project goes through this module so the API key
is applied in one place and tests can patch a single seam.
"""

import logging

import stripe
from django.conf import settings

logger = logging.getLogger(__name__)


def get_field(obj, key, default=None):
    """Read a key from a Stripe object or plain dict, treating null as missing."""
    try:
        value = obj[key]
    except KeyError:
        return default
    return default if value is None else value


def _configure():
    stripe.api_key = settings.STRIPE_SECRET_KEY


def ensure_customer(user) -> str:
    """
    Return the member's Stripe customer id, creating the customer if needed.
    """
    if user.stripe_customer_id:
        return user.stripe_customer_id

    _configure()
    customer = stripe.Customer.create(
        email=user.email,
        name=user.get_display_name(),
        metadata={'user_id': str(user.id)},
    )
    user.stripe_customer_id = customer['id']
    user.save(update_fields=['stripe_customer_id'])
    logger.info("Stripe customer created", extra={'user_id': str(user.id), 'customer_id': customer['id']})
    return customer['id']


def create_checkout_session(**params):
    _configure()
    return stripe.checkout.Session.create(**params)


def retrieve_checkout_session(session_id: str):
    _configure()
    return stripe.checkout.Session.retrieve(session_id)


def construct_event(payload, signature: str, secret: str):
    """Verify a webhook signature and parse the event."""
    return stripe.Webhook.construct_event(payload, signature, secret)


def list_active_subscriptions(customer_id: str):
    _configure()
    return stripe.Subscription.list(customer=customer_id, status='active', limit=100)['data']


def update_subscription(subscription_id: str, **params):
    _configure()
    return stripe.Subscription.modify(subscription_id, **params)


def create_subscription_schedule(**params):
    _configure()
    return stripe.SubscriptionSchedule.create(**params)


def list_subscription_schedules(customer_id: str):
    _configure()
    return stripe.SubscriptionSchedule.list(customer=customer_id, limit=10)['data']


def release_subscription_schedule(schedule_id: str):
    _configure()
    return stripe.SubscriptionSchedule.release(schedule_id)


def create_portal_session(*, customer_id: str, return_url: str):
    _configure()
    return stripe.billing_portal.Session.create(customer=customer_id, return_url=return_url)


def list_charges(customer_id: str, limit: int = 10):
    _configure()
    return stripe.Charge.list(customer=customer_id, limit=limit)['data']


def list_subscriptions(customer_id: str, limit: int = 5):
    _configure()
    return stripe.Subscription.list(customer=customer_id, status='all', limit=limit)['data']


def retrieve_subscription(subscription_id: str):
    _configure()
    return stripe.Subscription.retrieve(subscription_id)
