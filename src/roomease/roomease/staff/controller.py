from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import (
    admin_required,
    current_role,
    error,
    json_body,
    json_errors,
    login_required,
    required_int,
)
from ..container import Container
from ..core.enums import UserStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    staff = container.staff_service

    @app.route("/api/departments", methods=["GET"], endpoint="list_departments")
    @login_required
    @json_errors
    def list_departments():
        return jsonify([d.to_dict() for d in staff.list_departments()])

    @app.route("/api/departments/<int:department_id>/faculties", methods=["GET"], endpoint="list_faculties")
    @login_required
    @json_errors
    def list_faculties(department_id: int):
        return jsonify([f.to_dict() for f in staff.list_faculties(department_id)])

    @app.route("/api/departments/<int:department_id>/users", methods=["GET"], endpoint="department_users")
    @login_required
    @json_errors
    def department_users(department_id: int):
        return jsonify(staff.list_department_users(department_id))

    @app.route("/api/departments/<int:department_id>/user-names", methods=["GET"], endpoint="department_user_names")
    @login_required
    @json_errors
    def department_user_names(department_id: int):
        return jsonify(staff.list_user_names(department_id))

    @app.route("/api/faculties/<int:faculty_id>/users", methods=["GET"], endpoint="faculty_roster")
    @login_required
    @json_errors
    def faculty_roster(faculty_id: int):
        roster = staff.faculty_roster(faculty_id)
        if roster is None:
            return error("Faculty not found", 404)
        return jsonify(roster)

    @app.route("/api/staff", methods=["GET"], endpoint="list_staff")
    @login_required
    @json_errors
    def list_staff():
        return jsonify(staff.list_staff())

    @app.route("/api/staff/<int:user_id>", methods=["GET"], endpoint="staff_profile")
    @login_required
    @json_errors
    def staff_profile(user_id: int):
        return jsonify(staff.staff_profile(user_id))

    @app.route("/api/staff/<int:user_id>/avatar", methods=["GET"], endpoint="staff_avatar")
    @login_required
    @json_errors
    def staff_avatar(user_id: int):
        return jsonify({"avatar": staff.avatar_url(user_id)})

    @app.route("/api/staff/<int:user_id>/timetable", methods=["GET"], endpoint="staff_timetable")
    @login_required
    @json_errors
    def staff_timetable(user_id: int):
        return jsonify(staff.timetable(user_id))

    @app.route("/api/staff", methods=["POST"], endpoint="register_staff")
    @admin_required
    @json_errors
    def register_staff():
        data = json_body()
        result = staff.register_staff(
            current_role=current_role(),
            email=data.get("email", ""),
            name=data.get("name", ""),
            department=data.get("department", ""),
            faculty_id=required_int(data, "faculty_id"),
            phone_no=data.get("phone_no", ""),
        )
        return (
            jsonify(
                {
                    "message": "Staff registered successfully!",
                    "id": result.user.user_id,
                    "email": result.user.email,
                    "delivery": result.delivery.to_dict(),
                }
            ),
            201,
        )

    @app.route("/api/staff/<int:user_id>/status", methods=["PATCH"], endpoint="set_staff_status")
    @admin_required
    @json_errors
    def set_staff_status(user_id: int):
        data = json_body()
        try:
            status = UserStatus(data.get("status", ""))
        except ValueError:
            raise ValidationError("Invalid status")
        return jsonify(staff.set_status(current_role=current_role(), user_id=user_id, status=status))
