from datetime import timedelta
from unittest.mock import Mock, patch

import pytest
import stripe
from django.utils import timezone

from apps.accounts.models import SubscriptionStatus
from apps.core.models import AdminSettings
from apps.matches.models import Match
from apps.messaging.models import MessageCreditPurchase, MessageCredits
from apps.payments.models import WebhookEvent, WebhookEventStatus
from apps.payments.services import (
    build_line_item,
    create_checkout,
    schedule_downgrade,
    cancel_downgrade,
    verify_event,
    process_event,
    get_receipts,
    InvalidCheckoutError,
    InvalidDowngradeError,
    NoActiveSubscriptionError,
    NoScheduledDowngradeError,
    WebhookNotConfiguredError,
    WebhookProcessingError,
    WebhookSignatureError,
)
from apps.payments.services.webhooks import EVENT_HANDLERS
from apps.video.models import ExtensionStatus, VideoSession, VideoSessionExtension

GATEWAY = 'apps.payments.stripe_gateway'


@pytest.mark.django_db
class TestBuildLineItem:
    """Tests for checkout pricing"""

    def test_subscription_uses_tier_price(self):
        item = build_line_item(kind='subscription', tier='casual')

        assert item['price_data']['unit_amount'] == 999
        assert item['price_data']['recurring'] == {'interval': 'month'}

    def test_free_tier_rejected(self):
        with pytest.raises(InvalidCheckoutError, match='Invalid tier'):
            build_line_item(kind='subscription', tier='free')

    def test_extension_amount_must_match(self):
        assert build_line_item(kind='extension', cents=800)['price_data']['unit_amount'] == 800

        with pytest.raises(InvalidCheckoutError):
            build_line_item(kind='extension', cents=500)

    def test_extension_amount_follows_admin_pricing(self):
        AdminSettings.objects.create(key=AdminSettings.PRICING, value={'extension_cents': 900})

        assert build_line_item(kind='extension', cents=900)['price_data']['unit_amount'] == 900
        with pytest.raises(InvalidCheckoutError):
            build_line_item(kind='extension', cents=800)

    def test_second_date(self):
        item = build_line_item(kind='second-date')

        assert item['price_data']['unit_amount'] == 1000
        assert 'recurring' not in item['price_data']

    def test_unknown_kind(self):
        with pytest.raises(InvalidCheckoutError, match='Invalid kind'):
            build_line_item(kind='gift')


@pytest.mark.django_db
class TestCreateCheckout:
    """Tests for create_checkout"""

    def test_subscription_checkout(self, user, stripe_settings):
        session = {'id': 'cs_test_1', 'url': 'https://checkout.stripe.test/cs_test_1'}
        with patch(f'{GATEWAY}.ensure_customer', return_value='cus_new'), \
                patch(f'{GATEWAY}.create_checkout_session', return_value=session) as create:
            result = create_checkout(user=user, kind='subscription', tier='Dating')

        assert result == {'url': session['url'], 'id': 'cs_test_1'}
        params = create.call_args.kwargs
        assert params['mode'] == 'subscription'
        assert params['customer'] == 'cus_new'
        assert params['metadata']['tier'] == 'dating'
        assert params['metadata']['user_id'] == str(user.id)
        assert params['success_url'] == 'https://app.rendeview.test'

    def test_extension_uses_payment_mode(self, user, stripe_settings):
        with patch(f'{GATEWAY}.ensure_customer', return_value='cus_new'), \
                patch(f'{GATEWAY}.create_checkout_session', return_value={'id': 'cs', 'url': 'u'}) as create:
            create_checkout(user=user, kind='extension', cents=800, redirect_url='https://app.test/call')

        params = create.call_args.kwargs
        assert params['mode'] == 'payment'
        assert params['success_url'] == 'https://app.test/call'
        assert params['metadata']['cents'] == '800'

    def test_invalid_request_never_reaches_stripe(self, user):
        with patch(f'{GATEWAY}.create_checkout_session') as create:
            with pytest.raises(InvalidCheckoutError):
                create_checkout(user=user, kind='subscription', tier='platinum')

        create.assert_not_called()


@pytest.mark.django_db
class TestScheduleDowngrade:
    """Tests for schedule_downgrade"""

    def test_requires_lower_tier(self, subscriber):
        with pytest.raises(InvalidDowngradeError, match='lower tier'):
            schedule_downgrade(user=subscriber, tier='business')

    def test_rejects_unknown_tier(self, subscriber):
        with pytest.raises(InvalidDowngradeError):
            schedule_downgrade(user=subscriber, tier='gold')

    def test_requires_customer(self, make_user):
        member = make_user(membership_tier='dating')

        with pytest.raises(NoActiveSubscriptionError):
            schedule_downgrade(user=member, tier='casual')

    def test_requires_active_subscription(self, subscriber):
        with patch(f'{GATEWAY}.list_active_subscriptions', return_value=[]):
            with pytest.raises(NoActiveSubscriptionError):
                schedule_downgrade(user=subscriber, tier='free')

    def test_downgrade_to_free_cancels_at_period_end(self, subscriber, stripe_subscription):
        with patch(f'{GATEWAY}.list_active_subscriptions', return_value=[stripe_subscription()]), \
                patch(f'{GATEWAY}.update_subscription') as update:
            result = schedule_downgrade(user=subscriber, tier='free')

        update.assert_called_once_with(
            'sub_test_1',
            cancel_at_period_end=True,
            metadata={'scheduled_tier': 'free'},
        )
        subscriber.refresh_from_db()
        assert subscriber.scheduled_tier == 'free'
        assert subscriber.tier_change_at is not None
        # Tier is unchanged until the period ends
        assert subscriber.membership_tier == 'business'
        assert result.scheduled_tier == 'free'
        assert 'Business benefits until February 1, 2026' in result.message

    def test_downgrade_to_paid_tier_creates_schedule(self, subscriber, stripe_subscription):
        with patch(f'{GATEWAY}.list_active_subscriptions', return_value=[stripe_subscription()]), \
                patch(f'{GATEWAY}.update_subscription') as update, \
                patch(f'{GATEWAY}.create_subscription_schedule') as create_schedule:
            schedule_downgrade(user=subscriber, tier='casual')

        update.assert_called_once_with('sub_test_1', metadata={'scheduled_tier': 'casual'})
        params = create_schedule.call_args.kwargs
        assert params['from_subscription'] == 'sub_test_1'
        assert len(params['phases']) == 2
        assert params['phases'][1]['start_date'] == 1769904000
        assert params['phases'][1]['items'][0]['price_data']['unit_amount'] == 999
        subscriber.refresh_from_db()
        assert subscriber.scheduled_tier == 'casual'

    def test_period_read_from_items(self, subscriber, stripe_subscription):
        subscription = stripe_subscription(current_period_start=None, current_period_end=None)
        subscription['items']['data'][0]['current_period_start'] = 1767225600
        subscription['items']['data'][0]['current_period_end'] = 1769904000

        with patch(f'{GATEWAY}.list_active_subscriptions', return_value=[subscription]), \
                patch(f'{GATEWAY}.update_subscription'):
            result = schedule_downgrade(user=subscriber, tier='free')

        assert result.tier_change_at.year == 2026
        assert result.tier_change_at.month == 2


@pytest.mark.django_db
class TestCancelDowngrade:
    """Tests for cancel_downgrade"""

    def test_nothing_scheduled(self, subscriber):
        with pytest.raises(NoScheduledDowngradeError):
            cancel_downgrade(user=subscriber)

    def test_cancel_restores_subscription(self, subscriber, stripe_subscription):
        subscriber.scheduled_tier = 'casual'
        subscriber.save()
        subscription = stripe_subscription(cancel_at_period_end=True)
        schedules = [
            {'id': 'sub_sched_1', 'status': 'active', 'metadata': {'scheduled_tier': 'casual'}},
            {'id': 'sub_sched_2', 'status': 'released', 'metadata': {'scheduled_tier': 'dating'}},
        ]

        with patch(f'{GATEWAY}.list_active_subscriptions', return_value=[subscription]), \
                patch(f'{GATEWAY}.update_subscription') as update, \
                patch(f'{GATEWAY}.list_subscription_schedules', return_value=schedules), \
                patch(f'{GATEWAY}.release_subscription_schedule') as release:
            cancel_downgrade(user=subscriber)

        update.assert_called_once_with('sub_test_1', cancel_at_period_end=False, metadata={'scheduled_tier': ''})
        release.assert_called_once_with('sub_sched_1')
        subscriber.refresh_from_db()
        assert subscriber.scheduled_tier is None
        assert subscriber.tier_change_at is None


@pytest.mark.django_db
class TestVerifyEvent:
    """Tests for webhook signature verification"""

    def test_missing_signature_is_logged(self, stripe_settings):
        with pytest.raises(WebhookSignatureError) as exc_info:
            verify_event(payload=b'{}', signature=None, source_ip='10.0.0.1')

        assert exc_info.value.missing is True
        event = WebhookEvent.objects.get()
        assert event.status == WebhookEventStatus.SIGNATURE_MISSING
        assert event.source_ip == '10.0.0.1'

    def test_secret_not_configured(self, settings):
        settings.STRIPE_WEBHOOK_SECRET = ''

        with pytest.raises(WebhookNotConfiguredError):
            verify_event(payload=b'{}', signature='t=1,v1=abc')

    def test_bad_signature(self, stripe_settings):
        error = stripe.SignatureVerificationError('No signatures found', 't=1,v1=abc')
        with patch(f'{GATEWAY}.construct_event', side_effect=error):
            with pytest.raises(WebhookSignatureError):
                verify_event(payload=b'{}', signature='t=1,v1=abc')

        assert WebhookEvent.objects.get().status == WebhookEventStatus.SIGNATURE_FAILED

    def test_valid_signature(self, stripe_settings):
        with patch(f'{GATEWAY}.construct_event', return_value={'id': 'evt_1'}) as construct:
            event = verify_event(payload=b'{}', signature='t=1,v1=abc')

        assert event == {'id': 'evt_1'}
        construct.assert_called_once_with(b'{}', 't=1,v1=abc', 'whsec_test_123')


@pytest.mark.django_db
class TestProcessEvent:
    """Tests for webhook event handling"""

    def test_subscription_checkout_upgrades_member(self, user, stripe_event):
        user.stripe_customer_id = 'cus_test_1'
        user.save()
        session = {
            'id': 'cs_test_1',
            'mode': 'subscription',
            'customer': 'cus_test_1',
            'client_reference_id': str(user.id),
            'metadata': {'kind': 'subscription', 'tier': 'dating', 'user_id': str(user.id)},
        }

        assert process_event(stripe_event('checkout.session.completed', session)) is True

        user.refresh_from_db()
        assert user.membership_tier == 'dating'
        assert user.subscription_status == SubscriptionStatus.ACTIVE
        assert WebhookEvent.objects.get(event_id='evt_test_1').status == WebhookEventStatus.PROCESSED

    def test_duplicate_event_is_acknowledged(self, user, stripe_event):
        session = {
            'id': 'cs_test_1',
            'mode': 'subscription',
            'client_reference_id': str(user.id),
            'metadata': {'tier': 'casual', 'user_id': str(user.id)},
        }
        event = stripe_event('checkout.session.completed', session)
        process_event(event)

        assert process_event(event) is False
        assert WebhookEvent.objects.count() == 1

    def test_credit_checkout_adds_credits_once(self, user, stripe_event):
        session = {
            'id': 'cs_credits_1',
            'mode': 'payment',
            'metadata': {
                'kind': 'message_credits',
                'user_id': str(user.id),
                'pack': 'PACK_SMALL',
                'credits': '20',
            },
        }
        process_event(stripe_event('checkout.session.completed', session, event_id='evt_a'))
        process_event(stripe_event('checkout.session.completed', session, event_id='evt_b'))

        assert MessageCredits.objects.get(user=user).credits_remaining == 20
        assert MessageCreditPurchase.objects.get(stripe_session_id='cs_credits_1').status == 'completed'

    def test_extension_checkout_extends_call_once(self, user, other_user, stripe_event):
        user_a, user_b = Match.ordered_pair(user, other_user)
        match = Match.objects.create(user_a=user_a, user_b=user_b)
        video_session = VideoSession.objects.create(match=match, caller=user, callee=other_user, max_duration_minutes=5)
        extension = VideoSessionExtension.objects.create(
            video_session=video_session,
            initiator=user,
            responder=other_user,
            status=ExtensionStatus.AWAITING_PAYMENT,
            amount_cents=800,
            extension_seconds=600,
            stripe_session_id='cs_ext_1',
            expires_at=timezone.now(),
        )
        session = {
            'id': 'cs_ext_1',
            'mode': 'payment',
            'metadata': {
                'kind': 'extension',
                'extension_id': str(extension.id),
                'video_session_id': str(video_session.id),
                'user_id': str(user.id),
            },
        }
        process_event(stripe_event('checkout.session.completed', session, event_id='evt_a'))
        process_event(stripe_event('checkout.session.completed', session, event_id='evt_b'))

        video_session.refresh_from_db()
        extension.refresh_from_db()
        assert video_session.extended_seconds_total == 600
        assert extension.status == ExtensionStatus.COMPLETED

    def test_payment_failed_marks_past_due(self, subscriber, stripe_event):
        process_event(stripe_event('invoice.payment_failed', {'id': 'in_1', 'customer': 'cus_test_1'}))

        subscriber.refresh_from_db()
        assert subscriber.subscription_status == SubscriptionStatus.PAST_DUE

    def test_subscription_deleted_finalizes_free_downgrade(self, subscriber, stripe_subscription, stripe_event):
        subscriber.scheduled_tier = 'free'
        subscriber.save()
        subscription = stripe_subscription(status='canceled', metadata={'scheduled_tier': 'free'})

        process_event(stripe_event('customer.subscription.deleted', subscription))

        subscriber.refresh_from_db()
        assert subscriber.membership_tier == 'free'
        assert subscriber.scheduled_tier is None
        assert subscriber.subscription_status == SubscriptionStatus.CANCELED

    def test_subscription_deleted_without_downgrade(self, subscriber, stripe_subscription, stripe_event):
        process_event(stripe_event('customer.subscription.deleted', stripe_subscription(status='canceled')))

        subscriber.refresh_from_db()
        assert subscriber.membership_tier == 'business'
        assert subscriber.subscription_status == SubscriptionStatus.CANCELED

    def test_subscription_updated_applies_paid_downgrade(self, subscriber, stripe_subscription, stripe_event):
        subscriber.scheduled_tier = 'casual'
        subscriber.save()
        subscription = stripe_subscription(metadata={'scheduled_tier': 'casual'})

        process_event(stripe_event('customer.subscription.updated', subscription))

        subscriber.refresh_from_db()
        assert subscriber.membership_tier == 'casual'
        assert subscriber.scheduled_tier is None

    def test_subscription_updated_waits_for_change_date(self, subscriber, stripe_subscription, stripe_event):
        subscriber.scheduled_tier = 'casual'
        subscriber.tier_change_at = timezone.now() + timedelta(days=20)
        subscriber.save()
        subscription = stripe_subscription(metadata={'scheduled_tier': 'casual'})

        process_event(stripe_event('customer.subscription.updated', subscription))

        subscriber.refresh_from_db()
        assert subscriber.membership_tier == 'business'
        assert subscriber.scheduled_tier == 'casual'

    def test_subscription_updated_applies_once_change_date_passed(self, subscriber, stripe_subscription, stripe_event):
        subscriber.scheduled_tier = 'casual'
        subscriber.tier_change_at = timezone.now() - timedelta(minutes=1)
        subscriber.save()
        subscription = stripe_subscription(metadata={'scheduled_tier': 'casual'})

        process_event(stripe_event('customer.subscription.updated', subscription))

        subscriber.refresh_from_db()
        assert subscriber.membership_tier == 'casual'

    def test_renewal_applies_paid_downgrade(self, subscriber, stripe_subscription, stripe_event):
        subscriber.scheduled_tier = 'dating'
        subscriber.save()
        invoice = {
            'id': 'in_1',
            'customer': 'cus_test_1',
            'subscription': 'sub_test_1',
            'billing_reason': 'subscription_cycle',
        }

        with patch(f'{GATEWAY}.retrieve_subscription',
                   return_value=stripe_subscription(metadata={'scheduled_tier': 'dating'})), \
                patch(f'{GATEWAY}.update_subscription') as update:
            process_event(stripe_event('invoice.payment_succeeded', invoice))

        subscriber.refresh_from_db()
        assert subscriber.membership_tier == 'dating'
        update.assert_called_once_with('sub_test_1', metadata={'scheduled_tier': ''})

    def test_unhandled_event_is_recorded(self, stripe_event):
        assert process_event(stripe_event('charge.refunded', {'id': 'ch_1'})) is True
        assert WebhookEvent.objects.get().status == WebhookEventStatus.PROCESSED

    def test_handler_failure_is_logged_and_raised(self, stripe_event):
        failing = Mock(side_effect=RuntimeError('database unavailable'))

        with patch.dict(EVENT_HANDLERS, {'invoice.payment_failed': failing}):
            with pytest.raises(WebhookProcessingError):
                process_event(stripe_event('invoice.payment_failed', {'customer': 'cus_x'}))

        event = WebhookEvent.objects.get(event_id='evt_test_1')
        assert event.status == WebhookEventStatus.FAILED
        assert 'database unavailable' in event.error_message


@pytest.mark.django_db
class TestReceipts:
    """Tests for get_receipts"""

    def test_member_never_billed(self, user):
        assert get_receipts(user=user) == {
            'charges': [],
            'subscriptions': [],
            'customerEmailFallback': True,
        }

    def test_charges_and_subscriptions(self, subscriber, stripe_subscription):
        charge = {
            'id': 'ch_1',
            'amount': 4999,
            'currency': 'usd',
            'description': 'Business plan',
            'created': 1767225600,
            'receipt_url': 'https://pay.stripe.test/receipts/ch_1',
            'status': 'succeeded',
        }
        with patch(f'{GATEWAY}.list_charges', return_value=[charge]) as list_charges, \
                patch(f'{GATEWAY}.list_subscriptions', return_value=[stripe_subscription()]):
            result = get_receipts(user=subscriber)

        list_charges.assert_called_once_with('cus_test_1', limit=10)
        assert result['charges'][0]['amount_cents'] == 4999
        assert result['subscriptions'][0]['current_period_end'] == 1769904000
