"""API views for the support chat.

Anonymous visitors are recognised by their session cookie; registered
users and admins by their JWT. Clients poll the messages endpoint.
"""

from __future__ import annotations

import logging

from django.utils.decorators import method_decorator  # type: ignore
from django_ratelimit.decorators import ratelimit  # type: ignore
from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotAuthenticated, PermissionDenied  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsPlatformAdmin, is_platform_admin

from .models import Conversation
from .serializers import (
    ConversationCreateSerializer,
    ConversationSerializer,
    GuestUserSerializer,
    MessageCreateSerializer,
    MessageSerializer,
)
from .services import (
    ConversationClosedError,
    can_access,
    close_conversation,
    conversations_for,
    get_or_create_session_guest,
    get_session_guest,
    mark_read,
    needs_auto_reply,
    post_message,
    schedule_auto_reply,
    send_welcome_message,
    sender_for,
    split_guest_name,
    unread_for_admin_count,
)

logger = logging.getLogger(__name__)


@method_decorator(ratelimit(key="ip", rate="10/m", method="POST", block=True), name="post")
class GuestUserView(APIView):
    """Creates the guest record for the current session, or returns it."""

    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = GuestUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        guest, created = get_or_create_session_guest(request, **serializer.validated_data)
        return Response(
            GuestUserSerializer(guest).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


@method_decorator(ratelimit(key="ip", rate="10/m", method="POST", block=True), name="create")
@method_decorator(ratelimit(key="ip", rate="60/m", method="POST", block=True), name="messages")
class ConversationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Conversations visible to the requester.

    Admins list open conversations by default and can pass ``?status=``;
    users see their own; guests see the ones tied to their session.
    """

    serializer_class = ConversationSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):  # type: ignore
        qs = conversations_for(self.request)
        if self.action == "list" and is_platform_admin(self.request.user):
            qs = qs.filter(status=self.request.query_params.get("status", Conversation.Status.OPEN))
        return qs

    def get_object(self):  # type: ignore
        conversation = super().get_object()
        if not can_access(self.request, conversation):
            raise PermissionDenied("Access denied.")
        return conversation

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = request.user if request.user.is_authenticated else None
        guest = None
        if user is None:
            if data.get("guest_name") and data.get("guest_email"):
                first_name, last_name = split_guest_name(data["guest_name"])
                guest, _ = get_or_create_session_guest(
                    request,
                    first_name=first_name,
                    last_name=last_name,
                    email=data["guest_email"],
                    phone_number=data.get("guest_phone", ""),
                )
            else:
                guest = get_session_guest(request)
            if guest is None:
                return Response(
                    {"detail": "Must provide guest user information or be logged in."},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        conversation = Conversation.objects.create(
            user=user,
            guest_user=guest,
            item_type=data["item_type"],
            item_id=data["item_id"],
            subject=data["subject"],
        )
        logger.info(
            f"Conversation {conversation.pk} opened by "
            f"{'user ' + str(user.pk) if user else 'guest ' + str(guest.pk)}"
        )

        if data.get("message"):
            sender_id, sender_type = sender_for(request, conversation)
            post_message(conversation, sender_id=sender_id, sender_type=sender_type, content=data["message"])
        if guest is not None and conversation.item_type == "livechat":
            send_welcome_message(conversation)

        conversation.refresh_from_db()
        return Response(ConversationSerializer(conversation).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):  # type: ignore
        conversation = self.get_object()

        if request.method == "GET":
            mark_read(conversation, by_admin=is_platform_admin(request.user))
            return Response(MessageSerializer(conversation.messages.all(), many=True).data)

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sender_id, sender_type = sender_for(request, conversation)
        try:
            message = post_message(
                conversation, sender_id=sender_id, sender_type=sender_type, **serializer.validated_data
            )
        except ConversationClosedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        if needs_auto_reply(sender_type):
            schedule_auto_reply(message)
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post", "put"])
    def close(self, request, pk=None):  # type: ignore
        if not request.user.is_authenticated:
            raise NotAuthenticated()
        conversation = self.get_object()
        if not is_platform_admin(request.user) and conversation.user_id != request.user.id:
            raise PermissionDenied("Only the conversation owner or an admin can close it.")
        close_conversation(conversation)
        return Response(ConversationSerializer(conversation).data)


class ChatStatsView(APIView):
    permission_classes = [IsPlatformAdmin]

    def get(self, request):  # type: ignore
        return Response({"unread_conversations": unread_for_admin_count()})
