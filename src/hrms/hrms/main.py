from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .approvals.controller import register as register_approvals
from .attendance.controller import register as register_attendance
from .dashboard.controller import register as register_dashboard
from .employees.controller import register as register_employees
from .gps.controller import register as register_gps
from .leaves.controller import register as register_leaves
from .payroll.controller import register as register_payroll
from .requests.controller import register as register_requests
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)

        container = build_container(
            db_config=db_config,
            office_latitude=float(getattr(settings, "OFFICE_LATITUDE")),
            office_longitude=float(getattr(settings, "OFFICE_LONGITUDE")),
            token_ttl_days=int(getattr(settings, "TOKEN_TTL_DAYS")),
        )

    app.extensions["hrms.container"] = container
    register_error_handlers(app)

    register_users(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_requests(app, container)
    register_approvals(app, container)
    register_gps(app, container)
    register_payroll(app, container)
    register_dashboard(app, container)

    return app
