from django.contrib import admin

from reservations.models import Attraction, Booking, GiftInstrument, Purchase


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    fields = ["reserved_date", "reserved_time", "customer_name", "participants", "status"]
    readonly_fields = fields
    can_delete = False


@admin.register(Attraction)
class AttractionAdmin(admin.ModelAdmin):
    list_display = ["name", "location", "price", "pricing_mode", "max_capacity", "status"]
    list_filter = ["status", "pricing_mode"]
    search_fields = ["name", "location"]
    inlines = [BookingInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = [
        "attraction_name",
        "customer_name",
        "reserved_date",
        "reserved_time",
        "participants",
        "total_amount",
        "status",
    ]
    list_filter = ["status", "reserved_date"]
    search_fields = ["customer_name", "customer_email", "attraction_name"]


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = [
        "attraction_name",
        "customer_name",
        "quantity",
        "total_amount",
        "amount_paid",
        "payment_method",
        "created_at",
    ]
    list_filter = ["payment_method"]
    search_fields = ["customer_name", "attraction_name"]


@admin.register(GiftInstrument)
class GiftInstrumentAdmin(admin.ModelAdmin):
    list_display = ["code", "type", "initial_value", "balance", "status", "expiry_date"]
    list_filter = ["status", "type", "deleted"]
    search_fields = ["code", "description"]
    # Value fields change only through GiftInstrumentLedger.edit.
    readonly_fields = ["code", "type", "initial_value", "balance", "max_usage"]
