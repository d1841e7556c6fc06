from __future__ import annotations

from flask import Flask

from ..common.http import auth_guard, current_user, json_body, json_response
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    supervisor_required = auth_guard(container.auth_service, Role.ADMIN, Role.HR, Role.MANAGER)

    @app.get("/api/approvals")
    @supervisor_required
    def list_approvals():
        return json_response(container.approval_router.list_all())

    @app.get("/api/approvals/pending")
    @supervisor_required
    def list_pending_approvals():
        return json_response(container.approval_router.list_pending())

    @app.put("/api/approvals/<approval_id>")
    @supervisor_required
    def decide_approval(approval_id: str):
        payload = json_body()
        user = current_user()
        approval = container.approval_router.decide(
            approval_id,
            status=payload.get("status"),
            comments=payload.get("comments"),
            decided_by=user.employee_id or user.user_id,
        )
        return json_response(approval)
