# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for auth_service."""

import uuid
from datetime import datetime, timedelta

from amanah.models.session import Session as SessionModel
from amanah.security import verify_password
from amanah.services import auth_service


def test_create_user_normalizes_email(db_session):
    user = auth_service.create_user(db_session, "  Teller@Example.com ", "Secret123!")
    assert user.email == "teller@example.com"
    assert auth_service.get_user_by_email(db_session, "TELLER@example.com") == user


def test_authenticate_checks_password(db_session):
    auth_service.create_user(db_session, "teller@example.com", "Secret123!")

    assert auth_service.authenticate(db_session, "teller@example.com", "Secret123!")
    assert auth_service.authenticate(db_session, "teller@example.com", "wrong") is None
    assert auth_service.authenticate(db_session, "nobody@example.com", "x") is None


def test_authenticate_returns_inactive_users(db_session):
    user = auth_service.create_user(db_session, "teller@example.com", "Secret123!")
    user.is_active = False
    db_session.commit()

    found = auth_service.authenticate(db_session, "teller@example.com", "Secret123!")
    assert found is not None
    assert found.is_active is False


def test_create_and_get_session(db_session):
    user = auth_service.create_user(db_session, "teller@example.com", "Secret123!")

    session = auth_service.create_session(db_session, user.id, expiry_days=1)

    assert auth_service.get_session(db_session, session.token).user_id == user.id
    assert session.expires_at > datetime.utcnow() + timedelta(hours=23)


def test_expired_session_is_removed(db_session):
    user = auth_service.create_user(db_session, "teller@example.com", "Secret123!")
    db_session.add(
        SessionModel(
            user_id=user.id,
            token="expired-token",
            expires_at=datetime.utcnow() - timedelta(minutes=1),
        )
    )
    db_session.commit()

    assert auth_service.get_session(db_session, "expired-token") is None
    assert db_session.query(SessionModel).count() == 0


def test_rotate_session_replaces_token(db_session):
    user = auth_service.create_user(db_session, "teller@example.com", "Secret123!")
    session = auth_service.create_session(db_session, user.id)
    old_token = session.token

    rotated = auth_service.rotate_session(db_session, old_token)

    assert rotated is not None
    assert rotated.token != old_token
    assert auth_service.get_session(db_session, old_token) is None
    assert auth_service.get_session(db_session, rotated.token) is not None
    assert auth_service.rotate_session(db_session, "unknown") is None


def test_delete_session(db_session):
    user = auth_service.create_user(db_session, "teller@example.com", "Secret123!")
    session = auth_service.create_session(db_session, user.id)

    assert auth_service.delete_session(db_session, session.token) is True
    assert auth_service.delete_session(db_session, session.token) is False


def test_get_user_by_id_accepts_strings(db_session):
    user = auth_service.create_user(db_session, "teller@example.com", "Secret123!")

    assert auth_service.get_user_by_id(db_session, str(user.id)) == user
    assert auth_service.get_user_by_id(db_session, uuid.uuid4()) is None
    assert auth_service.get_user_by_id(db_session, "not-a-uuid") is None


def test_update_password_optionally_clears_reset_flag(db_session):
    user = auth_service.create_user(
        db_session, "teller@example.com", "Secret123!", needs_password_reset=True
    )

    auth_service.update_password(db_session, user, "Changed123!")
    assert verify_password("Changed123!", user.hashed_password)
    assert user.needs_password_reset is True

    auth_service.update_password(db_session, user, "Again123!", clear_reset_flag=True)
    assert user.needs_password_reset is False


def test_cleanup_expired_sessions(db_session):
    user = auth_service.create_user(db_session, "teller@example.com", "Secret123!")
    auth_service.create_session(db_session, user.id)
    db_session.add(
        SessionModel(
            user_id=user.id,
            token="old",
            expires_at=datetime.utcnow() - timedelta(days=1),
        )
    )
    db_session.commit()

    assert auth_service.cleanup_expired_sessions(db_session) == 1
    assert db_session.query(SessionModel).count() == 1
