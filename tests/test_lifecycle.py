from datetime import datetime, timedelta

import pytest

from app.inventory.core.error_catalog import AppError, ErrorCatalog
from app.inventory.core.lifecycle import LifecycleRecord, LifecycleState

T0 = datetime(2024, 1, 1, 9, 0, 0)


def test_delete_stamps_actor_and_time():
    record = LifecycleRecord().delete("owner-a", T0)

    assert record.state is LifecycleState.DELETED
    assert record.deleted_at == T0
    assert record.deleted_by == "owner-a"
    assert record.restored_at is None


def test_delete_twice_is_a_state_conflict():
    record = LifecycleRecord().delete("owner-a", T0)

    with pytest.raises(AppError) as exc:
        record.delete("owner-a", T0 + timedelta(minutes=1))
    assert exc.value.error == ErrorCatalog.RESOURCE_ALREADY_DELETED


def test_restore_without_delete_is_a_state_conflict():
    with pytest.raises(AppError) as exc:
        LifecycleRecord().restore("admin", T0)
    assert exc.value.error == ErrorCatalog.RESOURCE_NOT_DELETED


def test_delete_restore_restore_is_a_state_conflict():
    record = LifecycleRecord().delete("owner-a", T0).restore("owner-a", T0 + timedelta(hours=1))

    with pytest.raises(AppError) as exc:
        record.restore("owner-a", T0 + timedelta(hours=2))
    assert exc.value.error == ErrorCatalog.RESOURCE_NOT_DELETED


def test_restore_keeps_delete_stamps():
    restored = LifecycleRecord().delete("owner-a", T0).restore("admin", T0 + timedelta(hours=1))

    assert restored.state is LifecycleState.ACTIVE
    assert restored.deleted_at == T0
    assert restored.deleted_by == "owner-a"
    assert restored.restored_at == T0 + timedelta(hours=1)
    assert restored.restored_by == "admin"


def test_second_delete_keeps_previous_restore_stamps():
    record = (
        LifecycleRecord()
        .delete("owner-a", T0)
        .restore("admin", T0 + timedelta(hours=1))
        .delete("owner-b", T0 + timedelta(hours=2))
    )

    assert record.deleted_by == "owner-b"
    assert record.deleted_at == T0 + timedelta(hours=2)
    assert record.restored_by == "admin"
    assert record.restored_at == T0 + timedelta(hours=1)


def test_transitions_do_not_mutate_the_original():
    original = LifecycleRecord()
    original.delete("owner-a", T0)

    assert original.state is LifecycleState.ACTIVE
    assert original.deleted_at is None

