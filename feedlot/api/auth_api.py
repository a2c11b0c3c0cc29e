# feedlot/api/auth_api.py
from flask import current_app, request
from flask_login import current_user, login_required, login_user, logout_user
from flask_restx import Namespace, Resource, fields

from feedlot.exceptions import AuthenticationError, ValidationError
from feedlot.models import User

ns = Namespace("auth", description="Staff sign-in for recording events")

user_model = ns.model("User", {
    "id": fields.String(readonly=True),
    "email": fields.String,
    "display_name": fields.String,
})

login_input = ns.model("LoginInput", {
    "email": fields.String(required=True),
    "password": fields.String(required=True),
})


@ns.route("/login")
class Login(Resource):

    @ns.expect(login_input)
    @ns.marshal_with(user_model)
    def post(self):
        """Sign in with email and password."""
        data = request.get_json(silent=True) or {}
        email = (data.get("email") or "").strip().lower()
        password = data.get("password") or ""
        missing = [name for name, value in (("email", email), ("password", password)) if not value]
        if missing:
            raise ValidationError(f"Missing or invalid fields: {', '.join(missing)}", fields=missing)

        user = User.query.filter_by(email=email).first()
        # Same message for unknown email and wrong password
        if user is None or not user.check_password(password) or not login_user(user):
            current_app.logger.warning(f"Failed sign-in for '{email}'")
            raise AuthenticationError("Invalid email or password")

        current_app.logger.info(f"User {user.email} signed in")
        return user


@ns.route("/logout")
class Logout(Resource):

    @login_required
    def post(self):
        """Sign out."""
        current_app.logger.info(f"User {current_user.email} signed out")
        logout_user()
        return {"message": "Signed out"}


@ns.route("/me")
class CurrentUser(Resource):

    @ns.marshal_with(user_model)
    @login_required
    def get(self):
        """The signed-in staff member."""
        return current_user._get_current_object()
