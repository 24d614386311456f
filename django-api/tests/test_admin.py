"""Tests for the admin registrations."""

from django.contrib import admin

from reservations.models import GiftInstrument, Purchase


class TestGiftInstrumentAdmin:
    def test_value_fields_are_read_only(self):
        model_admin = admin.site._registry[GiftInstrument]

        readonly = set(model_admin.get_readonly_fields(request=None))

        assert {"code", "type", "initial_value", "balance", "max_usage"} <= readonly

    def test_status_and_expiry_stay_editable(self):
        model_admin = admin.site._registry[GiftInstrument]
        readonly = set(model_admin.get_readonly_fields(request=None))
        assert not {"status", "expiry_date", "description"} & readonly


class TestPurchaseAdmin:
    def test_lists_amount_paid(self):
        assert "amount_paid" in admin.site._registry[Purchase].list_display
