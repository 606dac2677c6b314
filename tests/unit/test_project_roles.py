import uuid

from castingfy.models.domain.project_domain import (
    Compensation,
    CompensationData,
    Role,
    is_server_id,
    normalize_roles,
)


def test_temporary_role_gets_server_id_and_compensation_follows():
    roles = [Role(id="tmp-abc", name="Lead")]
    compensation = Compensation(by_role={"tmp-abc": CompensationData(rate_type="flat", amount=500)})

    new_roles, new_compensation, id_map = normalize_roles(roles, compensation)

    server_id = new_roles[0].id
    assert is_server_id(server_id)
    assert server_id != "tmp-abc"
    assert id_map == {"tmp-abc": server_id}
    assert list(new_compensation.by_role) == [server_id]
    assert new_compensation.by_role[server_id].amount == 500


def test_server_ids_are_kept():
    existing = str(uuid.uuid4())
    roles = [Role(id=existing, name="Lead")]

    new_roles, _, id_map = normalize_roles(roles, Compensation())

    assert new_roles[0].id == existing
    assert id_map == {}


def test_role_without_id_is_assigned_one():
    new_roles, _, id_map = normalize_roles([Role(name="Extra")], Compensation())

    assert is_server_id(new_roles[0].id)
    assert id_map == {}


def test_compensation_for_removed_role_is_dropped():
    kept = str(uuid.uuid4())
    compensation = Compensation(
        by_role={
            kept: CompensationData(rate_type="daily", amount=120),
            str(uuid.uuid4()): CompensationData(rate_type="flat", amount=999),
        }
    )

    _, new_compensation, _ = normalize_roles([Role(id=kept)], compensation)

    assert list(new_compensation.by_role) == [kept]


def test_duplicate_server_ids_are_split():
    shared = str(uuid.uuid4())

    new_roles, _, _ = normalize_roles([Role(id=shared), Role(id=shared)], Compensation())

    assert new_roles[0].id == shared
    assert new_roles[1].id != shared
    assert is_server_id(new_roles[1].id)


def test_blobs_serialize_with_camel_case_keys():
    role = Role(id="tmp-1", age_min=18, age_max=30, is_remote=True)

    dumped = role.model_dump(by_alias=True)

    assert dumped["ageMin"] == 18
    assert dumped["isRemote"] is True
    assert "voiceStyle" in dumped["requirements"]
