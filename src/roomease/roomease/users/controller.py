from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import current_user_id, error, json_body, json_errors, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @json_errors
    def login():
        data = json_body()
        s_user = container.auth_service.login(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["email"] = s_user.email
        session["role"] = s_user.role.value
        return jsonify({"user": s_user.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="current_user")
    def current_user():
        if "user_id" not in session:
            return error("Not logged in", 401)
        return jsonify(
            {
                "id": session["user_id"],
                "name": session.get("name"),
                "email": session.get("email"),
                "role": session.get("role"),
            }
        )

    @app.route("/api/profile", methods=["GET"], endpoint="profile")
    @login_required
    @json_errors
    def profile():
        return jsonify(container.user_service.fetch_profile(current_user_id()))

    @app.route("/api/profile", methods=["PATCH"], endpoint="edit_profile")
    @login_required
    @json_errors
    def edit_profile():
        data = json_body()
        updated = container.user_service.edit_profile(
            current_user_id(),
            name=data.get("name"),
            phone_no=data.get("phone_no"),
            avatar=data.get("avatar"),
        )
        session["name"] = updated["name"]
        return jsonify(updated)

    @app.route("/api/profile/password", methods=["POST"], endpoint="change_password")
    @login_required
    @json_errors
    def change_password():
        data = json_body()
        container.user_service.change_password(
            current_user_id(),
            current_password=data.get("current_password", ""),
            new_password=data.get("new_password", ""),
        )
        return jsonify({"message": "Password updated successfully"})

    @app.route("/api/profile/onboarding", methods=["POST"], endpoint="complete_onboarding")
    @login_required
    @json_errors
    def complete_onboarding():
        container.user_service.complete_onboarding(current_user_id())
        return jsonify({"message": "ok"})
