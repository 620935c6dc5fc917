"""
Decentralized form-state coordination.

Many independently rendered input controls register with one FormController,
report their value and validation status through a FieldHandle, and get
notified whenever the aggregate form state changes. No control needs to know
about its siblings.

Quick Start:
    >>> from formstate import FormController, ValueField
    >>>
    >>> def required(value):
    ...     return '' if value else 'required'
    >>>
    >>> form = FormController(on_change=lambda payload: print(payload.valid))
    True
    >>> name = ValueField('name', initial='', validator=required).bind(form)
    False
    >>> name.change('Ann')
    True

Architecture:
    FieldRegistry    name → FieldHandle, owned by one controller
    FormController   snapshots, change events, submit/clear lifecycle
    FormContext      what dependents see; NULL_FORM_CONTEXT outside a form

Modules:
    - field_handle: FieldHandle contract, NO_VALIDATOR, UNSET
    - field_registry: FieldRegistry
    - form_controller: FormController
    - snapshot_model: ChangeEvent, FormSnapshot and callback payloads
    - context: FormContext, form_scope(), use_form()
    - config: FormConfig and logging switches
    - fields: ValueField, an in-memory field implementation
    - exceptions: FormStateError, FieldHandleError
"""

# Field handles
from formstate.field_handle import (
    FieldHandle,
    FieldValue,
    Validator,
    NO_VALIDATOR,
    UNSET,
    as_field_handle,
)

# Registry
from formstate.field_registry import FieldRegistry

# Value types
from formstate.snapshot_model import (
    ChangeEvent,
    ChangePayload,
    ChangeReason,
    ControllerState,
    FormSnapshot,
    InitialState,
    PayloadField,
    SubmitPayload,
    check_is_valid,
)

# Configuration
from formstate.config import FormConfig

# Context
from formstate.context import (
    FormContext,
    NULL_FORM_CONTEXT,
    form_scope,
    get_current_form,
    use_form,
)

# Controller
from formstate.form_controller import FormController

# Fields
from formstate.fields import ValueField

# Exceptions
from formstate.exceptions import FormStateError, FieldHandleError

__all__ = [
    # Field handles
    'FieldHandle',
    'FieldValue',
    'Validator',
    'NO_VALIDATOR',
    'UNSET',
    'as_field_handle',
    # Registry
    'FieldRegistry',
    # Value types
    'ChangeEvent',
    'ChangePayload',
    'ChangeReason',
    'ControllerState',
    'FormSnapshot',
    'InitialState',
    'PayloadField',
    'SubmitPayload',
    'check_is_valid',
    # Configuration
    'FormConfig',
    # Context
    'FormContext',
    'NULL_FORM_CONTEXT',
    'form_scope',
    'get_current_form',
    'use_form',
    # Controller
    'FormController',
    # Fields
    'ValueField',
    # Exceptions
    'FormStateError',
    'FieldHandleError',
]

__version__ = '1.0.0'
__description__ = 'Decentralized form-state coordination'
