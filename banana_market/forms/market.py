"""Product, cultivar, reservation, and order action forms."""

from wtforms import (BooleanField, DateField, DecimalField, IntegerField,
                     SelectField, StringField, TextAreaField)
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional
from banana_market.forms.base import JSONForm
from banana_market.models import ProductType


class ProductForm(JSONForm):
    name = StringField('Name', validators=[DataRequired(message='Name is required'), Length(max=150)])
    description = TextAreaField('Description', validators=[Optional()])
    product_type = SelectField('Product Type', choices=[(t, t) for t in ProductType.ALL],
                               validators=[DataRequired(message='Product type is required')])
    cultivar_id = IntegerField('Cultivar', validators=[Optional()])
    price_per_unit = DecimalField('Price per Unit', places=2, validators=[
        InputRequired(message='Price is required'),
        NumberRange(min=0, message='Price cannot be negative')
    ])
    available_quantity = IntegerField('Available Quantity', validators=[
        InputRequired(message='Quantity is required'),
        NumberRange(min=0, message='Quantity cannot be negative')
    ])
    unit = StringField('Unit', default='kg', validators=[Optional(), Length(max=20)])
    harvest_date = DateField('Harvest Date', validators=[DataRequired(message='Harvest date is required')])
    expiry_date = DateField('Expiry Date', validators=[Optional()])
    image_url = StringField('Image URL', validators=[Optional(), Length(max=255)])


class CultivarForm(JSONForm):
    name = StringField('Name', validators=[DataRequired(message='Name is required'), Length(max=100)])
    thai_name = StringField('Thai Name', validators=[DataRequired(message='Thai name is required'), Length(max=100)])
    description = TextAreaField('Description', validators=[DataRequired(message='Description is required')])
    characteristics = TextAreaField('Characteristics', validators=[Optional()])
    growing_conditions = TextAreaField('Growing Conditions', validators=[Optional()])
    uses = TextAreaField('Uses', validators=[Optional()])
    image_url = StringField('Image URL', validators=[Optional(), Length(max=255)])


class ReserveForm(JSONForm):
    """Reserve a quantity of a product for delivery."""
    quantity = IntegerField('Quantity', validators=[
        InputRequired(message='Quantity is required'),
        NumberRange(min=1, message='Quantity must be at least 1')
    ])
    use_saved_address = BooleanField('Use saved address')
    delivery_address = TextAreaField('Delivery Address', validators=[Optional(), Length(max=1000)])
    note = TextAreaField('Note', validators=[Optional(), Length(max=1000)])


class ShipForm(JSONForm):
    tracking_number = StringField('Tracking Number', validators=[
        DataRequired(message='Please enter a tracking number'),
        Length(max=100)
    ])
    carrier = StringField('Carrier', validators=[Optional(), Length(max=100)])


class CancelForm(JSONForm):
    reason = TextAreaField('Reason', validators=[Optional(), Length(max=500)])


class ReviewForm(JSONForm):
    rating = IntegerField('Rating', validators=[
        InputRequired(message='Rating is required'),
        NumberRange(min=1, max=5, message='Rating must be between 1 and 5')
    ])
    comment = TextAreaField('Comment', validators=[Optional(), Length(max=2000)])
