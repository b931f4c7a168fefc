"""Admin registration for reviews."""

from django.contrib import admin

from .models import Review
from .services import recompute_item_rating


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('title', 'item_type', 'item_id', 'user', 'rating', 'status', 'verified', 'created_at')
    list_filter = ('status', 'item_type', 'rating', 'verified')
    search_fields = ('title', 'comment', 'user__email')
    actions = ['approve', 'reject']

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        recompute_item_rating(obj.item_type, obj.item_id)

    def _set_status(self, queryset, status):
        items = set(queryset.values_list('item_type', 'item_id'))
        queryset.update(status=status)
        for item_type, item_id in items:
            recompute_item_rating(item_type, item_id)

    @admin.action(description='Approve selected reviews')
    def approve(self, request, queryset):
        self._set_status(queryset, Review.Status.APPROVED)

    @admin.action(description='Reject selected reviews')
    def reject(self, request, queryset):
        self._set_status(queryset, Review.Status.REJECTED)
