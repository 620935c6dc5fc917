"""
Headless signup form wired with formstate.

Shows the pieces a host application provides: field objects that own their
values, a submit callback that completes later through ``on_finish``, and a
listener that re-renders whenever the form changes.
"""

import logging

from formstate import FormController, SubmitPayload, ValueField, form_scope, use_form

logger = logging.getLogger(__name__)


def required(value):
    return '' if value else 'required'


def email_address(value):
    if not value:
        return 'required'
    return '' if '@' in value else 'not an email address'


class SignupForm:
    """Owns the controller and the outstanding submission, if any."""

    def __init__(self):
        self.pending = None
        self.form = FormController(
            on_submit=self.handle_submit,
            initial_values={'name': '', 'email': ''},
            defer_mount=True,
        )
        self.form.connect_listener(self.render)

        with form_scope(self.form):
            self.name = ValueField('name', validator=required).bind(use_form())
            self.email = ValueField('email', validator=email_address).bind(use_form())
        # Fields are in place; the first render sees both of them
        self.form.mount()

    def render(self, context):
        errors = {k: v for k, v in context.get_errors().items() if v}
        logger.info(f"[{context.last_update.reason.value}] valid={context.valid} errors={errors}")

    def handle_submit(self, payload: SubmitPayload):
        if not payload.valid:
            payload.on_finish()
            return
        # Completed later, e.g. when the server answers
        self.pending = payload

    def server_replied(self, taken: bool):
        payload, self.pending = self.pending, None
        if taken:
            payload.set_error('email', 'already registered')
            payload.on_finish()
        else:
            payload.on_finish(True)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(message)s')

    signup = SignupForm()
    signup.name.change('Ann')
    signup.email.change('ann@example.com')
    signup.form.submit()
    signup.server_replied(taken=True)
    signup.email.change('ann@example.org')
    signup.form.submit()
    signup.server_replied(taken=False)
