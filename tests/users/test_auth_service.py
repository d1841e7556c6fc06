from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.hrms.hrms.core.enums import Role
from src.hrms.hrms.core.exceptions import AuthenticationError, NotFoundError, ValidationError

NOW = datetime(2026, 3, 10, 9, 0)


@pytest.fixture
def account(container, people):
    return container.user_service.create_account(
        username="rohan", password="secret123", role=Role.EMPLOYEE, employee_id=people.staff.id
    )


def test_password_is_hashed(account):
    assert account.password_hash != "secret123"
    assert account.employee_id


def test_login_issues_token_valid_for_seven_days(container, store, account):
    issued = container.auth_service.login("rohan", "secret123", now=NOW)

    assert len(issued.token) == 64
    assert issued.expires_at == NOW + timedelta(days=7)
    assert issued.user.role == Role.EMPLOYEE
    assert store.users[account.id].last_login == NOW


def test_login_rejects_bad_credentials(container, account):
    with pytest.raises(AuthenticationError):
        container.auth_service.login("rohan", "wrong", now=NOW)
    with pytest.raises(AuthenticationError):
        container.auth_service.login("nobody", "secret123", now=NOW)


def test_inactive_account_cannot_login(container, store, account):
    store.users[account.id] = replace(store.users[account.id], is_active=False)

    with pytest.raises(AuthenticationError):
        container.auth_service.login("rohan", "secret123", now=NOW)


def test_resolve_returns_session_user(container, account):
    issued = container.auth_service.login("rohan", "secret123", now=NOW)

    user = container.auth_service.resolve(issued.token, now=NOW + timedelta(days=1))

    assert user.user_id == account.id
    assert user.employee_id == account.employee_id


def test_expired_token_is_rejected_and_removed(container, store, account):
    issued = container.auth_service.login("rohan", "secret123", now=NOW)

    with pytest.raises(AuthenticationError):
        container.auth_service.resolve(issued.token, now=NOW + timedelta(days=7))
    assert issued.token not in store.tokens


def test_logout_revokes_token(container, account):
    issued = container.auth_service.login("rohan", "secret123", now=NOW)
    container.auth_service.logout(issued.token)

    with pytest.raises(AuthenticationError):
        container.auth_service.resolve(issued.token, now=NOW)


def test_create_account_validation(container, people, account):
    with pytest.raises(ValidationError):
        container.user_service.create_account(username="rohan", password="secret123", role=Role.HR)
    with pytest.raises(ValidationError):
        container.user_service.create_account(username="short", password="123", role=Role.HR)
    with pytest.raises(ValidationError):
        container.user_service.create_account(username="noemp", password="secret123", role=Role.EMPLOYEE)
    with pytest.raises(NotFoundError):
        container.user_service.create_account(
            username="ghost", password="secret123", role=Role.EMPLOYEE, employee_id="ghost"
        )
