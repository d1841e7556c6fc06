from __future__ import annotations

from flask import Flask

from ..common.http import auth_guard, bearer_token, json_body, json_response
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    admin_required = auth_guard(container.auth_service, Role.ADMIN)

    @app.post("/api/auth/login")
    def login():
        payload = json_body()
        issued = container.auth_service.login(payload.get("username", ""), payload.get("password", ""))
        return json_response(issued)

    @app.post("/api/auth/logout")
    def logout():
        token = bearer_token()
        if not token:
            raise AuthenticationError("Authentication required")
        container.auth_service.logout(token)
        return json_response({"success": True})

    @app.post("/api/users")
    @admin_required
    def create_user():
        payload = json_body()
        try:
            role = Role(payload.get("role", Role.EMPLOYEE.value))
        except ValueError:
            raise ValidationError("Invalid role", {"role": "unknown value"})

        user = container.user_service.create_account(
            username=payload.get("username", ""),
            password=payload.get("password", ""),
            role=role,
            employee_id=payload.get("employeeId"),
        )
        return json_response(
            {"id": user.id, "username": user.username, "role": user.role, "employee_id": user.employee_id},
            201,
        )
