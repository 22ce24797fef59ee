from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    json_body,
    json_errors,
    login_required,
    required_int,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    rooms = container.room_service

    @app.route("/api/floors", methods=["GET"], endpoint="list_floors")
    @login_required
    @json_errors
    def list_floors():
        return jsonify([f.to_dict() for f in rooms.list_floors()])

    @app.route("/api/floors/available", methods=["GET"], endpoint="available_floors")
    @login_required
    @json_errors
    def available_floors():
        return jsonify(rooms.list_available_floors().to_dict())

    @app.route("/api/floors/<int:floor_id>/rooms", methods=["GET"], endpoint="list_rooms")
    @login_required
    @json_errors
    def list_rooms(floor_id: int):
        return jsonify(rooms.list_rooms(floor_id))

    @app.route("/api/floors/<int:floor_id>/rooms/available", methods=["GET"], endpoint="available_rooms")
    @login_required
    @json_errors
    def available_rooms(floor_id: int):
        return jsonify([r.to_dict() for r in rooms.list_available_rooms(floor_id)])

    @app.route("/api/rooms/<int:room_id>/users", methods=["GET"], endpoint="room_users")
    @login_required
    @json_errors
    def room_users(room_id: int):
        return jsonify(rooms.list_users_in_room(room_id))

    @app.route("/api/rooms/<int:room_id>/capacity", methods=["GET"], endpoint="room_capacity")
    @login_required
    @json_errors
    def room_capacity(room_id: int):
        return jsonify({"room_id": room_id, "capacity": rooms.get_room_capacity(room_id)})

    @app.route("/api/rooms", methods=["POST"], endpoint="add_room")
    @admin_required
    @json_errors
    def add_room():
        data = json_body()
        room = rooms.add_room(
            current_role=current_role(),
            name=data.get("name", ""),
            floor_id=required_int(data, "floor_id"),
            capacity=data.get("capacity"),
        )
        if room is None:
            return jsonify({"error": "Room already exists"}), 409
        return jsonify(room.to_dict()), 201

    @app.route("/api/rooms/<int:room_id>", methods=["PATCH"], endpoint="edit_room")
    @admin_required
    @json_errors
    def edit_room(room_id: int):
        data = json_body()
        room = rooms.edit_room(
            current_role=current_role(),
            room_id=room_id,
            name=data.get("name"),
            capacity=data.get("capacity"),
        )
        return jsonify(room.to_dict())

    @app.route("/api/rooms/<int:room_id>/assign", methods=["POST"], endpoint="assign_room")
    @admin_required
    @json_errors
    def assign_room(room_id: int):
        data = json_body()
        result = rooms.assign_room(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            user_id=required_int(data, "user_id"),
            room_id=room_id,
        )
        return jsonify(
            {
                "user_id": result.user_id,
                "room_id": result.room_id,
                "record_id": result.record_id,
                "delivery": result.delivery.to_dict(),
            }
        )

    @app.route("/api/staff/unassigned", methods=["GET"], endpoint="unassigned_staff")
    @admin_required
    @json_errors
    def unassigned_staff():
        return jsonify(rooms.list_unassigned_staff())
