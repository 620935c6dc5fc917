"""Tests for FormContext and contextvars-based form scoping."""
import contextvars

from formstate import (
    NULL_FORM_CONTEXT,
    ChangeReason,
    FormController,
    ValueField,
    form_scope,
    get_current_form,
    use_form,
)


def test_outside_scope_returns_null_context():
    assert get_current_form() is None
    assert use_form() is NULL_FORM_CONTEXT


def test_null_context_is_inert():
    ctx = NULL_FORM_CONTEXT

    assert ctx.in_form is False
    assert ctx.valid is True
    assert ctx.submitted is False
    assert ctx.submitting is False
    assert dict(ctx.initial_values) == {}
    assert ctx.last_update.reason is ChangeReason.CREATE
    assert ctx.last_update.when == 0

    ctx.add_field(ValueField('x'))
    ctx.remove_field('x')
    ctx.update_value('x', 1)
    ctx.update_values([('x', 1)])
    ctx.notify_value_change('x')
    ctx.submit()
    ctx.clear()
    ctx.set_error('x', 'bad')

    assert ctx.get_values() == {}
    assert ctx.get_errors() == {}
    assert ctx.get_value('x') == ''


def test_scope_exposes_controller_context():
    form = FormController(initial_values={'name': 'Ann'})

    with form_scope(form) as scoped:
        assert scoped is form
        assert get_current_form() is form
        ctx = use_form()
        assert ctx.in_form is True
        assert ctx.initial_values == {'name': 'Ann'}

    assert use_form() is NULL_FORM_CONTEXT


def test_scopes_nest_and_restore():
    outer = FormController()
    inner = FormController()

    with form_scope(outer):
        with form_scope(inner):
            assert get_current_form() is inner
        assert get_current_form() is outer
    assert get_current_form() is None


def test_scope_restored_after_exception():
    form = FormController()
    try:
        with form_scope(form):
            raise KeyError('x')
    except KeyError:
        pass
    assert get_current_form() is None


def test_scope_is_per_context():
    form = FormController()

    with form_scope(form):
        isolated = contextvars.Context()
        assert isolated.run(get_current_form) is None
        assert contextvars.copy_context().run(get_current_form) is form


def test_context_operations_act_on_live_controller():
    form = FormController()

    with form_scope(form):
        ctx = use_form()
        field = ValueField('name', initial='').bind(ctx)

    field.change('Ann')

    assert form.get_values() == {'name': 'Ann'}
    # Captured state is a snapshot; operations are live
    assert ctx.last_update.reason is ChangeReason.CREATE
    assert form.last_update.reason is ChangeReason.CHANGE_VALUE


def test_field_bound_to_null_context_works_standalone():
    field = ValueField('x', initial='a').bind(use_form())

    field.change('b')

    assert field.value == 'b'
    assert field.bound
