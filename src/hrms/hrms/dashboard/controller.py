from __future__ import annotations

from flask import Flask

from ..common.http import auth_guard, json_response
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    supervisor_required = auth_guard(container.auth_service, Role.ADMIN, Role.HR, Role.MANAGER)

    @app.get("/api/dashboard/stats")
    @supervisor_required
    def dashboard_stats():
        return json_response(container.dashboard_service.stats())
