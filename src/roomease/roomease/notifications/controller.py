from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user_id, json_errors, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    notifier = container.notifier

    @app.route("/api/notifications", methods=["GET"], endpoint="list_notifications")
    @login_required
    @json_errors
    def list_notifications():
        return jsonify([n.to_dict() for n in notifier.list_for_user(current_user_id())])

    @app.route("/api/notifications/unread-count", methods=["GET"], endpoint="unread_notifications")
    @login_required
    @json_errors
    def unread_notifications():
        return jsonify({"unread": notifier.unread_count(current_user_id())})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="read_notification")
    @login_required
    @json_errors
    def read_notification(notification_id: int):
        notifier.mark_read(user_id=current_user_id(), notification_id=notification_id)
        return jsonify({"message": "ok"})

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="read_all_notifications")
    @login_required
    @json_errors
    def read_all_notifications():
        return jsonify({"updated": notifier.mark_all_read(current_user_id())})
