"""Tests for FormController.submit() and the on_finish completion handle."""
import logging

import pytest

from formstate import ChangeReason, FormController, SubmitPayload, ValueField
from conftest import required


def test_submit_without_callback_only_flips_flags():
    form = FormController()
    before = form.last_update

    form.submit()

    assert form.submitted is True
    assert form.submitting is False
    assert form.last_update is before


def test_submitting_true_only_during_callback():
    observed = []

    def on_submit(payload):
        observed.append((form.submitting, form.submitted))

    form = FormController(on_submit=on_submit)
    form.submit()

    assert observed == [(True, True)]
    assert form.submitting is False
    assert form.submitted is True


def test_submitting_cleared_before_on_finish():
    pending = []
    form = FormController(on_submit=pending.append)
    ValueField('x', initial='v').bind(form)

    form.submit()

    # Callback deferred completion; submitting is already cleared
    assert form.submitting is False
    assert len(pending) == 1

    pending[0].on_finish()
    assert form.submitting is False
    assert form.submitted is True


def test_submitted_is_monotonic():
    form = FormController(on_submit=lambda payload: payload.on_finish(True))
    form.submit()
    form.clear()
    form.submit()

    assert form.submitted is True


def test_payload_carries_snapshot():
    payloads = []
    form = FormController(on_submit=payloads.append)
    ValueField('name', initial='Ann', validator=required).bind(form)
    ValueField('email', initial='', validator=required).bind(form)

    form.submit()

    payload = payloads[0]
    assert isinstance(payload, SubmitPayload)
    assert payload.values == {'name': 'Ann', 'email': ''}
    assert payload.errors == {'name': '', 'email': 'required'}
    assert payload.valid is False


def test_payload_set_error_reaches_field():
    def on_submit(payload):
        payload.set_error('email', 'already registered')
        payload.on_finish()

    form = FormController(on_submit=on_submit)
    email = ValueField('email', initial='a@b.com').bind(form)

    form.submit()

    assert email.validate() == 'already registered'
    assert form.valid is False
    assert form.last_update.reason is ChangeReason.SET_ERROR


def test_on_finish_with_clear_resets_fields():
    form = FormController(on_submit=lambda payload: payload.on_finish(True))
    field = ValueField('x', initial='').bind(form)
    field.change('typed')

    form.submit()

    assert field.value == ''
    assert form.last_update.reason is ChangeReason.RESET


def test_on_finish_without_clear_keeps_values():
    form = FormController(on_submit=lambda payload: payload.on_finish())
    field = ValueField('x', initial='').bind(form)
    field.change('typed')
    before = form.last_update

    form.submit()

    assert field.value == 'typed'
    assert form.last_update is before


def test_second_on_finish_is_ignored(caplog):
    pending = []
    form = FormController(on_submit=pending.append)
    field = ValueField('x', initial='').bind(form)

    form.submit()
    pending[0].on_finish()
    field.change('typed')

    with caplog.at_level(logging.WARNING, logger='formstate.form_controller'):
        pending[0].on_finish(True)

    assert field.value == 'typed'
    assert 'more than once' in caplog.text


def test_each_submission_gets_its_own_on_finish():
    pending = []
    form = FormController(on_submit=pending.append)

    form.submit()
    form.submit()
    pending[0].on_finish()
    pending[1].on_finish()

    assert pending[0].on_finish is not pending[1].on_finish


def test_failing_on_submit_still_clears_submitting():
    def on_submit(payload):
        raise ConnectionError('offline')

    form = FormController(on_submit=on_submit)

    with pytest.raises(ConnectionError):
        form.submit()

    assert form.submitting is False
    assert form.submitted is True
