from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from django_ipn_fixer.conf import settings as app_settings
from django_ipn_fixer.models import Order, Subscription, SubscriptionMeta


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "status",
        "display_is_parent",
        "display_is_renewal",
        "created_at",
    )
    list_filter = ("status", "created_at")
    search_fields = ("id",)
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    readonly_fields = ("created_at", "updated_at")

    @admin.display(description=_("Parent"), boolean=True)
    def display_is_parent(self, obj):
        return obj.is_parent

    @admin.display(description=_("Renewal"), boolean=True)
    def display_is_renewal(self, obj):
        return obj.is_renewal


class SubscriptionMetaInline(admin.TabularInline):
    model = SubscriptionMeta
    extra = 0
    fields = ("key", "value")


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "status",
        "parent_order",
        "display_correction_flag",
        "created_at",
    )
    list_filter = ("status", "created_at")
    search_fields = ("id", "parent_order__id")
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    raw_id_fields = ("parent_order",)
    filter_horizontal = ("renewal_orders",)
    readonly_fields = ("created_at", "updated_at", "display_correction_flag")
    inlines = [SubscriptionMetaInline]

    @admin.display(description=_("Correction flag"))
    def display_correction_flag(self, obj):
        value = obj.get_meta(app_settings.CORRECTION_FLAG_KEY)
        if value in ("", None):
            return "-"
        return format_html("<code>{}</code> ({})", value, type(value).__name__)
