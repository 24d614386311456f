"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from factories import NOW, make_attraction
from reservations.signals import booking_committed, gift_instrument_changed, purchase_committed
from reservations.stores import InMemoryStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def attraction():
    return make_attraction()


@pytest.fixture
def store(attraction) -> InMemoryStore:
    return InMemoryStore([attraction])


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def sent_events():
    """Collect (signal name, kwargs) for every domain event sent during a test."""
    events = []

    def make_receiver(name):
        def receiver(sender, **kwargs):
            kwargs.pop("signal", None)
            events.append((name, kwargs))

        return receiver

    receivers = {
        booking_committed: make_receiver("booking_committed"),
        purchase_committed: make_receiver("purchase_committed"),
        gift_instrument_changed: make_receiver("gift_instrument_changed"),
    }
    for signal, receiver in receivers.items():
        signal.connect(receiver, weak=False)
    yield events
    for signal, receiver in receivers.items():
        signal.disconnect(receiver)
