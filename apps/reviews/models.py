"""Models for the review domain.

A ``Review`` is feedback left by a registered traveller for one catalog
item, addressed by ``(item_type, item_id)``. One user can leave at most
one review per item.
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.catalog.models import ItemType


class Review(models.Model):
    """Represents a review left by a traveller for a catalog item."""

    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        APPROVED = 'approved', _('Approved')
        REJECTED = 'rejected', _('Rejected')

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='reviews'
    )
    item_type = models.CharField(max_length=20, choices=ItemType.choices)
    item_id = models.PositiveIntegerField()
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text=_('Rating from 1 to 5'),
    )
    title = models.CharField(max_length=255)
    comment = models.TextField()
    date_of_stay = models.DateField(null=True, blank=True)
    images = models.JSONField(default=list, blank=True)
    helpful_votes = models.PositiveIntegerField(default=0)
    verified = models.BooleanField(default=False)

    # Reply from the TravelEase team
    response = models.TextField(blank=True)
    response_date = models.DateTimeField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.APPROVED)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'item_type', 'item_id'], name='one_review_per_user_item'
            ),
        ]
        indexes = [
            models.Index(fields=['item_type', 'item_id', '-created_at']),
            models.Index(fields=['status']),
        ]

    def __str__(self) -> str:
        return f"Review by {self.user_id} for {self.item_type} #{self.item_id} (Rating: {self.rating})"

    def set_response(self, text: str) -> None:
        self.response = text
        self.response_date = timezone.now() if text else None
