"""
Tests for ``GroupService``: membership bookkeeping and status recompute.
"""

from __future__ import annotations

import sqlite3

import pytest

from user_groups_api.app.core.errors import ConstraintViolation, NotFound, TransactionFailed
from user_groups_api.app.core.statuses import GroupStatus
from user_groups_api.app.services.group_service import GroupService
from user_groups_api.app.services.user_service import UserService
from tests.support import group_status, run


@pytest.fixture
def members(raw_db: sqlite3.Connection) -> tuple[int, int, int]:
    """Two users in one group whose cached status says it has members."""

    ada = run(UserService.create_user("Ada", "ada@example.com")).id
    bob = run(UserService.create_user("Bob", "bob@example.com")).id
    group = run(GroupService.create_group("admins")).id
    run(GroupService.add_user_to_group(ada, group))
    run(GroupService.add_user_to_group(bob, group))
    raw_db.execute("UPDATE groups SET status = 'notEmpty' WHERE id = ?", (group,))
    return ada, bob, group


def test_create_group_starts_empty() -> None:
    group = run(GroupService.create_group("editors"))

    assert group.status is GroupStatus.EMPTY
    assert run(GroupService.get_group(group.id)) == group


def test_create_group_with_duplicate_name_is_constraint_violation() -> None:
    run(GroupService.create_group("editors"))

    with pytest.raises(ConstraintViolation):
        run(GroupService.create_group("editors"))


def test_get_missing_group_is_not_found() -> None:
    with pytest.raises(NotFound):
        run(GroupService.get_group(404))


def test_add_user_to_group_does_not_change_status(raw_db: sqlite3.Connection) -> None:
    user = run(UserService.create_user("Ada", "ada@example.com")).id
    group = run(GroupService.create_group("admins")).id

    run(GroupService.add_user_to_group(user, group))

    assert group_status(raw_db, group) == "empty"
    assert [u.id for u in run(GroupService.list_group_members(group))] == [user]


def test_add_user_to_group_twice_is_constraint_violation(members: tuple[int, int, int]) -> None:
    ada, _, group = members

    with pytest.raises(ConstraintViolation):
        run(GroupService.add_user_to_group(ada, group))


def test_add_unknown_user_or_group_is_not_found(members: tuple[int, int, int]) -> None:
    ada, _, group = members

    with pytest.raises(NotFound, match="User"):
        run(GroupService.add_user_to_group(999, group))
    with pytest.raises(NotFound, match="Group"):
        run(GroupService.add_user_to_group(ada, 999))


def test_removing_a_member_who_is_not_last_keeps_status(
    raw_db: sqlite3.Connection, members: tuple[int, int, int]
) -> None:
    ada, bob, group = members

    run(GroupService.remove_user_from_group(ada, group))

    assert [u.id for u in run(GroupService.list_group_members(group))] == [bob]
    assert group_status(raw_db, group) == "notEmpty"


def test_removing_last_member_marks_group_empty(
    raw_db: sqlite3.Connection, members: tuple[int, int, int]
) -> None:
    ada, bob, group = members

    run(GroupService.remove_user_from_group(ada, group))
    run(GroupService.remove_user_from_group(bob, group))

    remaining = raw_db.execute(
        "SELECT COUNT(*) AS n FROM user_groups WHERE group_id = ?", (group,)
    ).fetchone()["n"]
    assert remaining == 0
    assert group_status(raw_db, group) == "empty"


def test_removing_absent_membership_is_a_no_op(
    raw_db: sqlite3.Connection, members: tuple[int, int, int]
) -> None:
    _, _, group = members

    run(GroupService.remove_user_from_group(999, group))

    assert len(run(GroupService.list_group_members(group))) == 2
    assert group_status(raw_db, group) == "notEmpty"


def test_failed_status_update_rolls_back_the_delete(
    raw_db: sqlite3.Connection, members: tuple[int, int, int]
) -> None:
    ada, bob, group = members
    run(GroupService.remove_user_from_group(ada, group))
    raw_db.execute(
        """
        CREATE TRIGGER fail_group_status BEFORE UPDATE ON groups
        BEGIN
            SELECT RAISE(ABORT, 'simulated store failure');
        END
        """
    )

    with pytest.raises(TransactionFailed):
        run(GroupService.remove_user_from_group(bob, group))

    assert [u.id for u in run(GroupService.list_group_members(group))] == [bob]
    assert group_status(raw_db, group) == "notEmpty"


def test_list_members_of_missing_group_is_not_found() -> None:
    with pytest.raises(NotFound):
        run(GroupService.list_group_members(12))
