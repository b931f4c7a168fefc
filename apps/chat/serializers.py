"""Serializers for the support chat."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Conversation, GuestUser, Message


class GuestUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = GuestUser
        fields = ["id", "first_name", "last_name", "email", "phone_number", "created_at"]
        read_only_fields = ["id", "created_at"]


class MessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Message
        fields = [
            "id",
            "conversation",
            "sender_id",
            "sender_type",
            "content",
            "message_type",
            "file_url",
            "created_at",
        ]
        read_only_fields = fields


class ConversationSerializer(serializers.ModelSerializer):
    guest_user = GuestUserSerializer(read_only=True)
    participant_name = serializers.CharField(read_only=True)

    class Meta:
        model = Conversation
        fields = [
            "id",
            "user",
            "guest_user",
            "participant_name",
            "item_type",
            "item_id",
            "subject",
            "status",
            "last_message_at",
            "read_by_user",
            "read_by_admin",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ConversationCreateSerializer(serializers.Serializer):
    """Payload for opening a conversation.

    Anonymous visitors identify themselves with ``guest_name`` and
    ``guest_email`` unless their session already has a guest record.
    """

    subject = serializers.CharField(max_length=255, required=False, default="General Inquiry")
    item_type = serializers.CharField(max_length=30, required=False, default="inquiry")
    item_id = serializers.IntegerField(min_value=0, required=False, default=0)
    message = serializers.CharField(required=False, allow_blank=True, max_length=5000)
    guest_name = serializers.CharField(required=False, max_length=200)
    guest_email = serializers.EmailField(required=False)
    guest_phone = serializers.CharField(required=False, allow_blank=True, max_length=32)


class MessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=5000)
    message_type = serializers.ChoiceField(
        choices=Message.MessageType.choices, default=Message.MessageType.TEXT
    )
    file_url = serializers.URLField(required=False, allow_blank=True, max_length=500)

    def validate(self, attrs):  # type: ignore
        if attrs["message_type"] != Message.MessageType.TEXT and not attrs.get("file_url"):
            raise serializers.ValidationError({"file_url": ["Attachments require a file URL."]})
        return attrs
