"""Serializers for reviews.

The reviewing user is inferred from the request in the view; status and
the verified flag are decided server-side.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.catalog.registry import item_exists
from apps.users.serializers import UserSummarySerializer

from .models import Review
from .services import has_completed_trip


class ReviewSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = Review
        fields = [
            'id',
            'user',
            'item_type',
            'item_id',
            'rating',
            'title',
            'comment',
            'date_of_stay',
            'images',
            'helpful_votes',
            'verified',
            'response',
            'response_date',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ReviewCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating a new review."""

    images = serializers.ListField(child=serializers.URLField(max_length=500), required=False, max_length=10)

    class Meta:
        model = Review
        fields = ['item_type', 'item_id', 'rating', 'title', 'comment', 'date_of_stay', 'images']

    def validate_rating(self, value: int) -> int:  # type: ignore
        if value < 1 or value > 5:
            raise serializers.ValidationError('Rating must be between 1 and 5.')
        return value

    def validate(self, attrs):  # type: ignore
        item_type, item_id = attrs['item_type'], attrs['item_id']
        if not item_exists(item_type, item_id):
            raise serializers.ValidationError({'item_id': ['Reviewed item does not exist.']})
        user = self.context['request'].user
        if Review.objects.filter(user=user, item_type=item_type, item_id=item_id).exists():
            raise serializers.ValidationError(
                {'non_field_errors': ['You have already reviewed this item.']}
            )
        return attrs

    def create(self, validated_data):  # type: ignore
        user = self.context['request'].user
        verified = bool(validated_data.get('date_of_stay')) or has_completed_trip(
            user, validated_data['item_type'], validated_data['item_id']
        )
        status = Review.Status.PENDING if settings.REVIEWS_REQUIRE_MODERATION else Review.Status.APPROVED
        # A concurrent request can pass validate() first; the unique constraint decides.
        try:
            with transaction.atomic():
                return Review.objects.create(user=user, verified=verified, status=status, **validated_data)
        except IntegrityError:
            raise serializers.ValidationError(
                {'non_field_errors': ['You have already reviewed this item.']}
            )


class ReviewModerationSerializer(serializers.ModelSerializer):
    """Admin moderation: status, reply and light edits."""

    class Meta:
        model = Review
        fields = ['status', 'response', 'title', 'comment', 'rating']

    def update(self, instance, validated_data):  # type: ignore
        if 'response' in validated_data:
            instance.set_response(validated_data.pop('response'))
        return super().update(instance, validated_data)
