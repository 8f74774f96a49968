"""Profile and farm profile forms."""

from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional
from banana_market.forms.base import JSONForm


class ProfileForm(JSONForm):
    full_name = StringField('Full Name', validators=[
        DataRequired(message='Name is required'),
        Length(max=100)
    ])
    phone = StringField('Phone Number', validators=[Optional(), Length(max=20)])
    address = TextAreaField('Address', validators=[Optional(), Length(max=1000)])
    avatar_url = StringField('Avatar URL', validators=[Optional(), Length(max=255)])


class FarmProfileForm(JSONForm):
    farm_name = StringField('Farm Name', validators=[
        DataRequired(message='Farm name is required'),
        Length(max=150)
    ])
    farm_location = StringField('Farm Location', validators=[
        DataRequired(message='Farm location is required'),
        Length(max=255)
    ])
    farm_description = TextAreaField('Farm Description', validators=[Optional(), Length(max=2000)])
    farm_image_url = StringField('Farm Image URL', validators=[Optional(), Length(max=255)])


class FarmUpgradeRequestForm(JSONForm):
    """Request to become a farm seller."""
    farm_name = StringField('Farm Name', validators=[
        DataRequired(message='Farm name is required'),
        Length(min=2, max=150)
    ])
    farm_location = StringField('Farm Location', validators=[
        DataRequired(message='Farm location is required'),
        Length(max=255)
    ])
    description = TextAreaField('Description', validators=[Optional(), Length(max=2000)])
