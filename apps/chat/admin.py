"""Admin registration for the support chat."""

from django.contrib import admin

from .models import Conversation, GuestUser, Message


class MessageInline(admin.TabularInline):
    model = Message
    extra = 0
    readonly_fields = ("sender_id", "sender_type", "created_at")


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ("subject", "user", "guest_user", "item_type", "status", "read_by_admin", "last_message_at")
    list_filter = ("status", "read_by_admin", "item_type")
    search_fields = ("subject", "user__email", "guest_user__email")
    inlines = [MessageInline]


@admin.register(GuestUser)
class GuestUserAdmin(admin.ModelAdmin):
    list_display = ("first_name", "last_name", "email", "phone_number", "created_at")
    search_fields = ("email", "first_name", "last_name")
