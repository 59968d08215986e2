from datetime import date

from flask import current_app
# Import Flask-WTF base form and field/validator utilities for input validation.
from flask_wtf import FlaskForm
from wtforms import DateField, DecimalField, IntegerField, PasswordField, SelectField, StringField, TextAreaField
from wtforms.validators import (
    DataRequired,
    Email,
    EqualTo,
    Length,
    NumberRange,
    Optional,
    ValidationError,
)

from plastic_challenge.models.certificate import CRITERIA_TYPES
from plastic_challenge.models.environmental_factor import CATEGORIES
from plastic_challenge.models.user import STATUSES

REPORT_TYPES = ("users", "logs", "statistics")


# Form schema for new account registration.
class RegisterForm(FlaskForm):
    username = StringField('Username', validators=[
        DataRequired(message="Username is required"),
        Length(min=3, max=50, message="Username must be between 3 and 50 characters")
    ])
    email = StringField('Email', validators=[
        DataRequired(message="Email is required"),
        Email(message="Invalid email address"),
        Length(max=255, message="Email must be 255 characters or less")
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message="Password is required"),
        Length(min=6, message="Password must be at least 6 characters")
    ])
    confirm_password = PasswordField('Confirm Password', validators=[
        DataRequired(message="Please confirm your password"),
        EqualTo('password', message="Passwords do not match")
    ])


# Login accepts either the username or the email in one field.
class LoginForm(FlaskForm):
    login = StringField('Username or Email', validators=[
        DataRequired(message="Username or email is required")
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message="Password is required")
    ])


class ProfileEmailForm(FlaskForm):
    email = StringField('Email', validators=[
        DataRequired(message="Email is required"),
        Email(message="Invalid email address"),
        Length(max=255, message="Email must be 255 characters or less")
    ])


class ChangePasswordForm(FlaskForm):
    current_password = PasswordField('Current Password', validators=[
        DataRequired(message="Current password is required")
    ])
    new_password = PasswordField('New Password', validators=[
        DataRequired(message="New password is required"),
        Length(min=6, message="Password must be at least 6 characters")
    ])
    confirm_password = PasswordField('Confirm New Password', validators=[
        DataRequired(message="Please confirm your new password"),
        EqualTo('new_password', message="New passwords do not match")
    ])


# Form schema for a participant's plastic-avoidance entry.
class LogEntryForm(FlaskForm):
    category = SelectField('Item Category', choices=[(c, c.title()) for c in CATEGORIES], validators=[
        DataRequired(message="Please select an item category")
    ])
    quantity = IntegerField('Quantity')
    log_date = DateField('Date', default=date.today, validators=[Optional()])

    # The upper bound is a challenge rule, so it comes from config.
    def validate_quantity(self, field):
        limit = current_app.config["MAX_LOG_QUANTITY"]
        if field.data is None or not 1 <= field.data <= limit:
            raise ValidationError(f"Quantity must be a whole number between 1 and {limit}")

    # Logs describe items already avoided, so future dates are rejected.
    def validate_log_date(self, field):
        if field.data and field.data > date.today():
            raise ValidationError("Date cannot be in the future")


# Form schema for certificate definitions created by admins.
class CertificateForm(FlaskForm):
    name = StringField('Certificate Name', validators=[
        DataRequired(message="Certificate name is required"),
        Length(max=100, message="Name must be 100 characters or less")
    ])
    description = TextAreaField('Description', validators=[
        DataRequired(message="Description is required")
    ])
    criteria_type = SelectField('Criteria Type', choices=[(c, c.title()) for c in CRITERIA_TYPES], validators=[
        DataRequired(message="Criteria type is required")
    ])
    criteria_value = IntegerField('Items Required', default=0, validators=[
        Optional(),
        NumberRange(min=0, message="Criteria value cannot be negative")
    ])
    design_style = StringField('Design Style', validators=[
        DataRequired(message="Design style is required"),
        Length(max=50, message="Design style must be 50 characters or less")
    ])

    def validate_criteria_value(self, field):
        if self.criteria_type.data == "auto" and not field.data:
            raise ValidationError('"Auto" criteria requires a criteria value greater than 0.')


class AwardForm(FlaskForm):
    user_id = IntegerField('User', validators=[DataRequired(message="Please select a user")])
    certificate_id = IntegerField('Certificate', validators=[DataRequired(message="Please select a certificate")])
    personal_message = TextAreaField('Personal Message', validators=[
        Optional(),
        Length(max=1000, message="Message must be 1000 characters or less")
    ])


# Admin form for replacing the per-unit savings of a category.
class FactorForm(FlaskForm):
    category = SelectField('Item Category', choices=[(c, c.title()) for c in CATEGORIES], validators=[
        DataRequired(message="Please select an item category")
    ])
    co2_per_unit = DecimalField('CO2 Saved per Item (g)', places=2, validators=[
        NumberRange(min=0, message="CO2 per item cannot be negative")
    ])
    water_per_unit = DecimalField('Water Saved per Item (L)', places=2, validators=[
        NumberRange(min=0, message="Water per item cannot be negative")
    ])
    source = StringField('Source', validators=[
        Optional(),
        Length(max=255, message="Source must be 255 characters or less")
    ])


class UserStatusForm(FlaskForm):
    status = SelectField('Status', choices=[(s, s.title()) for s in STATUSES], validators=[
        DataRequired(message="Status is required")
    ])


class ReportForm(FlaskForm):
    report_type = SelectField('Report Type', choices=[(r, r.title()) for r in REPORT_TYPES], validators=[
        DataRequired(message="Invalid report type")
    ])
