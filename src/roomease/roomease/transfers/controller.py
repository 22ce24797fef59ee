from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_date
from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    json_body,
    json_errors,
    login_required,
    required_int,
    roles_required,
)
from ..container import Container
from ..core.enums import Role, TransferStatus
from ..core.exceptions import ValidationError
from .service import TransferOutcome


def _outcome_json(outcome: TransferOutcome) -> dict:
    record = outcome.record
    return {
        "id": record.record_id,
        "status": record.status.value,
        "transfer_room_id": record.transfer_room_id,
        "current_room_id": record.current_room_id,
        "request_by": record.request_by,
        "processed_by": record.processed_by,
        "reason": record.reason,
        "created": format_date(record.created_at),
        "delivery": outcome.delivery.to_dict(),
    }


def register(app: Flask, container: Container) -> None:
    transfers = container.transfer_service

    @app.route("/api/transfers/requests", methods=["POST"], endpoint="submit_transfer_request")
    @roles_required(Role.STAFF, Role.STUDENT)
    @json_errors
    def submit_transfer_request():
        data = json_body()
        outcome = transfers.submit_request(
            current_role=current_role(),
            user_id=current_user_id(),
            transfer_room_id=required_int(data, "transfer_room_id"),
            reason=data.get("reason", ""),
        )
        return jsonify(_outcome_json(outcome)), 201

    @app.route("/api/transfers/requests/pending", methods=["GET"], endpoint="has_pending_request")
    @login_required
    @json_errors
    def has_pending_request():
        return jsonify({"has_pending": transfers.has_pending_request(current_user_id())})

    @app.route("/api/transfers/history", methods=["GET"], endpoint="request_history")
    @login_required
    @json_errors
    def request_history():
        return jsonify(transfers.request_history(current_user_id()))

    @app.route("/api/transfers", methods=["GET"], endpoint="list_transfers")
    @admin_required
    @json_errors
    def list_transfers():
        try:
            status = TransferStatus(request.args.get("status", TransferStatus.PENDING.value))
        except ValueError:
            raise ValidationError("Invalid status")
        return jsonify(transfers.list_by_status(status))

    @app.route("/api/transfers/<int:record_id>/approve", methods=["POST"], endpoint="approve_transfer")
    @admin_required
    @json_errors
    def approve_transfer(record_id: int):
        outcome = transfers.approve(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            record_id=record_id,
        )
        return jsonify(_outcome_json(outcome))

    @app.route("/api/transfers/<int:record_id>/reject", methods=["POST"], endpoint="reject_transfer")
    @admin_required
    @json_errors
    def reject_transfer(record_id: int):
        outcome = transfers.reject(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            record_id=record_id,
        )
        return jsonify(_outcome_json(outcome))

    @app.route("/api/transfers/direct", methods=["POST"], endpoint="transfer_staff")
    @admin_required
    @json_errors
    def transfer_staff():
        data = json_body()
        outcome = transfers.transfer_staff(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            user_id=required_int(data, "user_id"),
            room_id=required_int(data, "room_id"),
            reason=data.get("reason", ""),
        )
        return jsonify(_outcome_json(outcome)), 201
