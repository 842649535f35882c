# app/tests/test_policy_and_subjects.py
from types import SimpleNamespace

import pytest

from app.domain import Actor, Role
from app.errors import AuthorizationError, ValidationError
from app.services.policy import can_delete, can_modify, ensure_admin, ensure_can_delete
from app.services.subjects import (
    MovieSubject,
    SeriesSubject,
    subject_columns,
    subject_from_ids,
    subject_of,
)


def test_only_owner_can_modify_even_for_admins():
    assert can_modify(1, Role.USER, 1) is True
    assert can_modify(2, Role.USER, 1) is False
    assert can_modify(2, Role.ADMIN, 1) is False


def test_owner_or_admin_can_delete():
    assert can_delete(1, Role.USER, 1) is True
    assert can_delete(2, Role.ADMIN, 1) is True
    assert can_delete(2, Role.USER, 1) is False


def test_ensure_helpers_raise_authorization_error():
    with pytest.raises(AuthorizationError):
        ensure_can_delete(Actor(id=5, role=Role.USER), owner_id=6)
    with pytest.raises(AuthorizationError):
        ensure_admin(Actor(id=5, role=Role.USER))
    ensure_admin(Actor(id=5, role=Role.ADMIN))


def test_role_parse_is_strict():
    assert Role.parse("Admin") is Role.ADMIN
    with pytest.raises(ValueError):
        Role.parse("ADMIN")
    with pytest.raises(ValueError):
        Role.parse(None)


def test_subject_needs_exactly_one_id():
    assert subject_from_ids(3, None) == MovieSubject(3)
    assert subject_from_ids(None, 4) == SeriesSubject(4)
    with pytest.raises(ValidationError):
        subject_from_ids(3, 4)
    with pytest.raises(ValidationError):
        subject_from_ids(None, None)


def test_subject_storage_encoding():
    assert subject_columns(MovieSubject(7)) == {"movie_id": 7, "series_id": None}
    assert subject_columns(SeriesSubject(8)) == {"movie_id": None, "series_id": 8}
    assert subject_of(SimpleNamespace(movie_id=None, series_id=8)) == SeriesSubject(8)
    with pytest.raises(ValidationError):
        subject_of(SimpleNamespace(movie_id=1, series_id=8))
