"""Base form for JSON request bodies."""

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from banana_market.exceptions import ValidationException


class JSONForm(FlaskForm):
    """FlaskForm fed from a JSON body.

    Nulls count as missing fields and numbers are passed to the fields as
    text, the way a browser form would submit them. CSRF is enforced by
    CSRFProtect on the request header rather than per form.
    """

    class Meta(FlaskForm.Meta):
        csrf = False

        def wrap_formdata(self, form, formdata):
            if request.is_json and not isinstance(request.get_json(silent=True), dict):
                raise ValidationException('Request body must be a JSON object')
            formdata = super().wrap_formdata(form, formdata)
            if formdata is None or not request.is_json:
                return formdata
            items = []
            for key, value in formdata.items(multi=True):
                if value is None:
                    continue
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    value = str(value)
                items.append((key, value))
            return ImmutableMultiDict(items)

    def validate_or_raise(self):
        """Validate the submitted data or raise with the field errors."""
        if not self.validate_on_submit():
            raise ValidationException('Invalid input', details=self.errors)
        return self
