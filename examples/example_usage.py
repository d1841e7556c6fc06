"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; business rules live in the services.
"""

import importlib
from datetime import date

from dotenv import load_dotenv

from config import get_settings_module

from src.hrms.hrms.container import build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        office_latitude=settings.OFFICE_LATITUDE,
        office_longitude=settings.OFFICE_LONGITUDE,
        token_ttl_days=settings.TOKEN_TTL_DAYS,
    )

    employees = container.employee_service.list_employees()
    for employee in employees:
        print(employee.employee_code, employee.name, employee.designation)

    if employees:
        today = date.today()
        for record in container.attendance_service.list_records(employee_id=employees[0].id, work_date=today):
            print(record.date, record.punch_in, record.punch_out, record.working_hours)


if __name__ == "__main__":
    main()
