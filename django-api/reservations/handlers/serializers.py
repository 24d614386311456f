"""Serializers for transforming domain models to API responses and parsing requests.

Monetary values are emitted as JSON numbers. Request serializers check
shape only; business rules are left to the domain so errors name the same
fields everywhere.
"""

from rest_framework import serializers

from reservations.domain.gift_instruments import derived_status

MONEY = {"max_digits": 10, "decimal_places": 2, "coerce_to_string": False}


class AttractionSerializer(serializers.Serializer):
    """Serializer for Attraction domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    duration = serializers.IntegerField()
    duration_unit = serializers.CharField()
    max_capacity = serializers.IntegerField(source="max_capacity.value")
    price = serializers.DecimalField(source="price.amount", **MONEY)
    pricing_mode = serializers.CharField(source="pricing_mode.value")
    availability = serializers.DictField(child=serializers.BooleanField())
    time_slots = serializers.ListField(child=serializers.TimeField(format="%H:%M"))
    status = serializers.CharField(source="status.value")


class QuoteSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(source="subtotal.amount", **MONEY)
    discount = serializers.DecimalField(source="discount.amount", **MONEY)
    total = serializers.DecimalField(source="total.amount", **MONEY)


class QuoteQuerySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1, default=1)
    discount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, default=0)


class DateWindowQuerySerializer(serializers.Serializer):
    start = serializers.DateField(required=False)
    days = serializers.IntegerField(min_value=1, max_value=366, required=False)


class TimeQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class CustomerSerializer(serializers.Serializer):
    name = serializers.CharField()
    email = serializers.CharField()
    phone = serializers.CharField()


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    attraction_id = serializers.UUIDField(source="attraction_id.value")
    attraction_name = serializers.CharField()
    customer = CustomerSerializer()
    date = serializers.DateField(source="reserved_date")
    time = serializers.TimeField(source="reserved_time", format="%H:%M")
    participants = serializers.IntegerField()
    status = serializers.CharField(source="status.value")
    total_amount = serializers.DecimalField(source="total_amount.amount", **MONEY)
    payment_method = serializers.CharField(source="payment_method.value")
    duration = serializers.CharField(source="duration_label")
    created_at = serializers.DateTimeField()


class BookingRequestSerializer(serializers.Serializer):
    attraction_id = serializers.CharField()
    date = serializers.DateField()
    time = serializers.TimeField()
    participants = serializers.IntegerField()
    first_name = serializers.CharField(allow_blank=True, default="")
    last_name = serializers.CharField(allow_blank=True, default="")
    email = serializers.CharField(allow_blank=True, default="")
    phone = serializers.CharField(allow_blank=True, default="")
    payment_method = serializers.CharField(allow_blank=True, default="")


class PurchaseSerializer(serializers.Serializer):
    """Serializer for Purchase domain model."""

    id = serializers.UUIDField(source="id.value")
    attraction_id = serializers.UUIDField(source="attraction_id.value")
    attraction_name = serializers.CharField()
    customer = CustomerSerializer()
    quantity = serializers.IntegerField()
    status = serializers.CharField(source="status.value")
    subtotal = serializers.DecimalField(source="subtotal.amount", **MONEY)
    discount = serializers.DecimalField(source="discount.amount", **MONEY)
    total_amount = serializers.DecimalField(source="total_amount.amount", **MONEY)
    amount_paid = serializers.DecimalField(source="amount_paid.amount", **MONEY)
    payment_method = serializers.CharField(source="payment_method.value")
    notes = serializers.CharField()
    created_at = serializers.DateTimeField()


class PurchaseRequestSerializer(serializers.Serializer):
    attraction_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    quantity = serializers.IntegerField(default=1)
    discount = serializers.CharField(default="0")
    amount_paid = serializers.CharField(default="0")
    notes = serializers.CharField(allow_blank=True, default="")
    payment_method = serializers.CharField(required=False)
    customer_name = serializers.CharField(allow_blank=True, default="")
    email = serializers.CharField(allow_blank=True, default="")
    phone = serializers.CharField(allow_blank=True, default="")


class GiftInstrumentSerializer(serializers.Serializer):
    """Serializer for GiftInstrument domain model.

    ``status`` is the derived status at the ``now`` given in context;
    ``stored_status`` is what is persisted.
    """

    code = serializers.CharField()
    type = serializers.CharField(source="type.value")
    initial_value = serializers.DecimalField(source="initial_value.amount", **MONEY)
    balance = serializers.DecimalField(source="balance.amount", **MONEY)
    max_usage = serializers.IntegerField()
    description = serializers.CharField()
    status = serializers.SerializerMethodField()
    stored_status = serializers.CharField(source="status.value")
    expiry_date = serializers.DateTimeField(allow_null=True)
    created_by = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_status(self, instrument) -> str:
        return derived_status(instrument, self.context["now"]).value


class GiftInstrumentWriteSerializer(serializers.Serializer):
    """Raw values are passed through so the ledger decides what is numeric."""

    type = serializers.CharField(required=False)
    initial_value = serializers.CharField(required=False, allow_blank=True)
    balance = serializers.CharField(required=False, allow_blank=True)
    max_usage = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    expiry_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    status = serializers.CharField(required=False)


class GiftInstrumentQuerySerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    type = serializers.CharField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)
    sort_by = serializers.CharField(default="created_at")
    sort_order = serializers.CharField(default="desc")
    page = serializers.IntegerField(min_value=1, default=1)
    per_page = serializers.IntegerField(min_value=1, max_value=100, required=False)
