# touristlog/admin/forms.py
from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField, SubmitField
from wtforms.validators import DataRequired, Length


class LoginForm(FlaskForm):
    passkey = PasswordField("Admin passkey", validators=[DataRequired(message="Passkey is required")])
    submit = SubmitField("Sign in")


class UserForm(FlaskForm):
    username = StringField("Username", validators=[DataRequired(message="Username is required"), Length(max=150)])
    password = PasswordField(
        "Password",
        validators=[DataRequired(message="Password is required"),
                    Length(min=8, message="Password must be at least 8 characters.")],
    )


class DeleteForm(FlaskForm):
    """CSRF token only."""
