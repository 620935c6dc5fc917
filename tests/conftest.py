"""Pytest configuration and shared fixtures."""
import pytest

import formstate.config as config_module
from formstate import FormController, ValueField


def required(value):
    """Validator used across tests: empty values are invalid."""
    return '' if value else 'required'


class PlainField:
    """Duck-typed field without a validate method."""

    def __init__(self, name, value=None):
        self.name = name
        self.value = value
        self.errors = []
        self.cleared = 0

    def get_value(self):
        return self.value

    def set_value(self, value):
        self.value = value

    def clear(self):
        self.value = None
        self.cleared += 1

    def set_error(self, message):
        self.errors.append(message)


@pytest.fixture(autouse=True)
def reset_debug_events():
    """Restore the module-level event logging switch after each test."""
    original = config_module.DEBUG_EVENTS
    yield
    config_module.DEBUG_EVENTS = original


@pytest.fixture
def changes():
    """List that collects every ChangePayload passed to on_change."""
    return []


@pytest.fixture
def form(changes):
    """Mounted controller recording payloads after its 'create' one into ``changes``."""
    controller = FormController(on_change=changes.append)
    changes.clear()
    return controller


@pytest.fixture
def signup_fields(form):
    """Two required text fields, bound to ``form`` with empty values."""
    name = ValueField('name', initial='', validator=required).bind(form)
    email = ValueField('email', initial='', validator=required).bind(form)
    return name, email
