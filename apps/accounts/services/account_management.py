"""Account management service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from uuid import UUID

from .exceptions import PasswordConfirmationError, UserNotFoundError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def delete_user_account(*, user_id: UUID, password: str) -> None:
    """
    GDPR-compliant account deletion (anonymization).

    The Stripe customer reference and any scheduled tier change are
    dropped along with personal data.

    Args:
        user_id: User's ID
        password: User's password for confirmation

    Raises:
        UserNotFoundError: If the user does not exist
        PasswordConfirmationError: If password is incorrect
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(id=user_id)
        )
    except User.DoesNotExist:
        raise UserNotFoundError(f"User {user_id} not found")

    if not user.check_password(password):
        raise PasswordConfirmationError("Invalid password")

    user.anonymize()
    logger.info('Account anonymized', extra={'user_id': str(user_id)})
