"""
Pytest configuration for tests at the root level.

This module contains pytest fixtures shared by every test package: stacked
shoes and an event recorder.
"""

import pytest

from casinojack.common.deck import stacked_deck
from casinojack.common.shoe import Shoe
from casinojack.events import EventEmitter


class EventRecorder:
    """Collects every event emitted on an emitter, in order."""

    def __init__(self, emitter: EventEmitter):
        self.events = []
        emitter.on_any(self.events.append)

    def names(self):
        return [event_type for event_type, _ in self.events]

    def of_type(self, name):
        return [data for event_type, data in self.events if event_type == name]


@pytest.fixture
def stacked_shoe():
    """Factory for an unshuffled shoe dealing the given cards or ranks first."""

    def make(*top):
        return Shoe.stacked(stacked_deck(top))

    return make


@pytest.fixture
def emitter():
    return EventEmitter()


@pytest.fixture
def recorder(emitter):
    return EventRecorder(emitter)
