from django.conf import settings
from django.db import models
import uuid


class Like(models.Model):
    """One member expressing interest in another."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    liker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='likes_given'
    )
    liked = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='likes_received'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'likes'
        constraints = [
            models.UniqueConstraint(fields=['liker', 'liked'], name='unique_like'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.liker} -> {self.liked}"


class Match(models.Model):
    """
    Mutual like between two members.

    The pair is stored ordered (``user_a`` has the smaller id) so each pair
    has exactly one row regardless of who liked first.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_a = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='matches_as_a'
    )
    user_b = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='matches_as_b'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    # Video call stats
    first_video_call_at = models.DateTimeField(null=True, blank=True)
    last_video_call_at = models.DateTimeField(null=True, blank=True)
    video_call_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'matches'
        constraints = [
            models.UniqueConstraint(fields=['user_a', 'user_b'], name='unique_match_pair'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user_a} <-> {self.user_b}"

    @staticmethod
    def ordered_pair(first, second):
        """Return the two users ordered by id."""
        if str(first.id) < str(second.id):
            return first, second
        return second, first

    @property
    def has_video_call(self) -> bool:
        return self.first_video_call_at is not None

    def has_participant(self, user) -> bool:
        return user.id in (self.user_a_id, self.user_b_id)

    def other_participant(self, user):
        return self.user_b if user.id == self.user_a_id else self.user_a
