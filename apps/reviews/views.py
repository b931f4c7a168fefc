"""API views for managing reviews."""

from __future__ import annotations

import logging

from django.db import models, transaction  # type: ignore
from rest_framework import filters, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import IsPlatformAdmin, is_platform_admin

from .models import Review
from .serializers import ReviewCreateSerializer, ReviewModerationSerializer, ReviewSerializer
from .services import recompute_item_rating

logger = logging.getLogger(__name__)


class ReviewViewSet(viewsets.ModelViewSet):
    """Public reading, signed-in writing, admin moderation."""

    queryset = Review.objects.select_related('user').all()
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ['created_at', 'rating', 'helpful_votes']

    def get_permissions(self):  # type: ignore
        if self.action in ('list', 'retrieve'):
            return [permissions.AllowAny()]
        if self.action in ('create', 'helpful'):
            return [permissions.IsAuthenticated()]
        return [IsPlatformAdmin()]

    def get_serializer_class(self):  # type: ignore
        if self.action == 'create':
            return ReviewCreateSerializer
        if self.action in ('update', 'partial_update'):
            return ReviewModerationSerializer
        return ReviewSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        params = self.request.query_params
        if params.get('item_type'):
            qs = qs.filter(item_type=params['item_type'])
        if params.get('item_id', '').isdigit():
            qs = qs.filter(item_id=int(params['item_id']))

        user = self.request.user
        if is_platform_admin(user):
            if params.get('status'):
                qs = qs.filter(status=params['status'])
            return qs
        approved = models.Q(status=Review.Status.APPROVED)
        if user.is_authenticated:
            # Authors still see their own reviews while they wait for moderation
            return qs.filter(approved | models.Q(user=user))
        return qs.filter(approved)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            review = serializer.save()
            recompute_item_rating(review.item_type, review.item_id)
        logger.info(f"Review {review.pk} created by user {request.user.pk} ({review.status})")
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):  # type: ignore
        partial = kwargs.pop('partial', False)
        review = self.get_object()
        serializer = self.get_serializer(review, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            review = serializer.save()
            recompute_item_rating(review.item_type, review.item_id)
        logger.info(f"Review {review.pk} moderated by admin {request.user.pk}: {review.status}")
        return Response(ReviewSerializer(review).data)

    def perform_destroy(self, instance):  # type: ignore
        item_type, item_id = instance.item_type, instance.item_id
        with transaction.atomic():
            instance.delete()
            recompute_item_rating(item_type, item_id)
        logger.info(f"Review for {item_type} #{item_id} deleted by admin {self.request.user.pk}")

    @action(detail=True, methods=['post'])
    def helpful(self, request, pk=None):  # type: ignore
        review = self.get_object()
        Review.objects.filter(pk=review.pk).update(helpful_votes=models.F('helpful_votes') + 1)
        review.refresh_from_db(fields=['helpful_votes'])
        return Response({'helpful_votes': review.helpful_votes}, status=status.HTTP_200_OK)
