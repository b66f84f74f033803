"""
End-to-end portal flows over HTTP.

An operator sets up an organization, staff join with invite codes, a
parent links a child, and an org admin hands the child to a specialist.
"""

import pytest

from support import bearer

OPERATOR = bearer("operator", super_admin=True)
ADMIN = bearer("admin-a", name="Alex Admin")
SPECIALIST = bearer("spec-s", name="Sasha Speech")
PARENT = bearer("parent-p")


def create_managed_org(client, name: str = "Acme") -> str:
    response = client.post("/admin/organizations", json={"name": name}, headers=OPERATOR)
    assert response.status_code == 201
    return response.json()["id"]


def operator_invite(client, org_id: str, role: str, max_uses=None) -> str:
    body = {"orgId": org_id, "role": role}
    if max_uses is not None:
        body["maxUses"] = max_uses
    response = client.post("/admin/invites", json=body, headers=OPERATOR)
    assert response.status_code == 201
    return response.json()["code"]


def join(client, code: str, headers: dict):
    return client.post("/join", json={"invite_code": code}, headers=headers)


@pytest.fixture
def acme(client) -> str:
    """Managed org with an org admin (admin-a) who joined by invite."""
    org_id = create_managed_org(client)
    code = operator_invite(client, org_id, "org_admin", max_uses=1)
    assert join(client, code, ADMIN).status_code == 200
    return org_id


@pytest.fixture
def acme_with_staff(client, acme) -> str:
    """Acme plus an active specialist (spec-s)."""
    response = client.post(f"/orgs/{acme}/invites", json={"role": "specialist"}, headers=ADMIN)
    assert response.status_code == 201
    assert join(client, response.json()["code"], SPECIALIST).status_code == 200
    return acme


@pytest.fixture
def acme_with_child(client, seed, acme_with_staff) -> str:
    """Acme where parent-p linked child c1 through an admin-issued parent invite."""
    seed.run(seed.child("c1", name="Mia", age=6))
    response = client.post(f"/orgs/{acme_with_staff}/parent-invites", json={}, headers=ADMIN)
    assert response.status_code == 201
    accepted = client.post(
        "/parent-invites/accept",
        json={"code": response.json()["code"], "childId": "c1"},
        headers=PARENT,
    )
    assert accepted.status_code == 200
    return acme_with_staff


class TestOperatorOnboarding:

    def test_org_admin_joins_with_single_use_invite(self, client):
        org_id = create_managed_org(client)
        code = operator_invite(client, org_id, "org_admin", max_uses=1)

        joined = join(client, code, ADMIN)

        assert joined.status_code == 200
        assert joined.json()["role"] == "org_admin"
        me = client.get("/me", headers=ADMIN).json()
        assert me["organizations"] == [
            {"org_id": org_id, "org_name": "Acme", "role": "org_admin"}
        ]

    def test_second_user_cannot_reuse_single_use_invite(self, client):
        org_id = create_managed_org(client)
        code = operator_invite(client, org_id, "org_admin", max_uses=1)
        assert join(client, code, ADMIN).status_code == 200

        second = join(client, code, bearer("latecomer"))

        assert second.status_code == 400
        assert second.json()["error"] == "INVITE_EXHAUSTED"

    def test_rejoining_does_not_consume_a_use(self, client):
        org_id = create_managed_org(client)
        code = operator_invite(client, org_id, "org_admin", max_uses=2)
        join(client, code, ADMIN)

        again = join(client, code, ADMIN)

        assert again.status_code == 200
        assert again.json()["already_member"] is True
        check = client.post("/invites/validate", json={"code": code}, headers=ADMIN).json()
        assert check["remaining_uses"] == 1

    def test_operator_acts_as_admin_of_created_org(self, client):
        org_id = create_managed_org(client)

        response = client.get(f"/orgs/{org_id}", headers=OPERATOR)

        assert response.status_code == 200
        assert response.json()["role"] == "org_admin"
        assert response.json()["via_super_admin"] is True

    def test_operator_is_not_admin_of_foreign_org(self, client, seed):
        org_id = seed.run(seed.org("Elsewhere", created_by="someone-else"))

        response = client.get(f"/orgs/{org_id}/team", headers=OPERATOR)

        assert response.status_code == 403

    def test_session_after_joining(self, client, acme):
        session = client.get("/session", headers=ADMIN)
        assert session.status_code == 200
        assert session.json() == {"has_org": True, "org_id": acme}


class TestParentLinking:

    def test_org_admin_sees_linked_child(self, client, acme_with_child):
        response = client.get(f"/orgs/{acme_with_child}/children", headers=ADMIN)

        assert response.status_code == 200
        children = response.json()
        assert [c["id"] for c in children] == ["c1"]
        assert children[0]["name"] == "Mia"
        assert children[0]["assigned_specialist_id"] is None

    def test_unassigned_specialist_sees_nothing(self, client, acme_with_child):
        response = client.get(f"/orgs/{acme_with_child}/children", headers=SPECIALIST)

        assert response.status_code == 200
        assert response.json() == []

    def test_connection_lists_parent(self, client, acme_with_child):
        response = client.get(f"/orgs/{acme_with_child}/connections", headers=ADMIN)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["connections"][0]["parent_user_id"] == "parent-p"
        assert body["connections"][0]["children"][0]["child_id"] == "c1"

    def test_validate_parent_invite_without_consuming(self, client, acme_with_staff):
        code = client.post(
            f"/orgs/{acme_with_staff}/parent-invites", json={"max_uses": 1}, headers=SPECIALIST
        ).json()["code"]

        first = client.post("/invites/validate", json={"code": code}, headers=PARENT).json()
        second = client.post("/invites/validate", json={"code": code}, headers=PARENT).json()

        assert first["valid"] is True
        assert first["kind"] == "parent"
        assert first["specialist_id"] == "spec-s"
        assert second["remaining_uses"] == 1

    def test_specialist_parent_invite_assigns_child(self, client, seed, acme_with_staff):
        seed.run(seed.child("c2", name="Leo"))
        code = client.post(
            f"/orgs/{acme_with_staff}/parent-invites", json={}, headers=SPECIALIST
        ).json()["code"]

        client.post("/parent-invites/accept", json={"code": code, "childId": "c2"}, headers=PARENT)

        children = client.get(f"/orgs/{acme_with_staff}/children", headers=SPECIALIST).json()
        assert [c["id"] for c in children] == ["c2"]


class TestAssignment:

    def test_assign_then_unassign(self, client, acme_with_child):
        org_id = acme_with_child
        assigned = client.post(
            f"/orgs/{org_id}/assignments",
            json={"childId": "c1", "specialistId": "spec-s"},
            headers=ADMIN,
        )
        assert assigned.status_code == 200

        detail = client.get(f"/orgs/{org_id}/children/c1", headers=SPECIALIST)
        assert detail.status_code == 200
        assert detail.json()["assigned_specialist_id"] == "spec-s"

        unassigned = client.request(
            "DELETE", f"/orgs/{org_id}/assignments", json={"childId": "c1"}, headers=ADMIN
        )
        assert unassigned.status_code == 200

        denied = client.get(f"/orgs/{org_id}/children/c1", headers=SPECIALIST)
        assert denied.status_code == 403
        assert denied.json()["error"] == "UNASSIGNED_CHILD_REQUIRES_ADMIN"

    def test_specialist_cannot_assign(self, client, acme_with_child):
        response = client.post(
            f"/orgs/{acme_with_child}/assignments",
            json={"childId": "c1", "specialistId": "spec-s"},
            headers=SPECIALIST,
        )
        assert response.status_code == 403
        assert response.json()["error"] == "ORG_ADMIN_REQUIRED"

    def test_assign_unknown_child_is_404(self, client, acme_with_staff):
        response = client.post(
            f"/orgs/{acme_with_staff}/assignments",
            json={"childId": "ghost", "specialistId": "spec-s"},
            headers=ADMIN,
        )
        assert response.status_code == 404
        assert response.json()["error"] == "CHILD_NOT_ASSIGNED_TO_ORG"

    def test_assigned_specialist_writes_notes(self, client, acme_with_child):
        org_id = acme_with_child
        client.post(
            f"/orgs/{org_id}/assignments",
            json={"childId": "c1", "specialistId": "spec-s"},
            headers=ADMIN,
        )

        created = client.post(
            f"/orgs/{org_id}/children/c1/notes",
            json={"text": "Great progress on /s/ sounds", "tags": ["speech"]},
            headers=SPECIALIST,
        )
        listed = client.get(f"/orgs/{org_id}/children/c1/notes", headers=ADMIN)

        assert created.status_code == 201
        assert created.json()["specialist_name"] == "Sasha Speech"
        assert [n["text"] for n in listed.json()] == ["Great progress on /s/ sounds"]

    def test_timeline_days_are_clamped(self, client, acme_with_child):
        response = client.get(
            f"/orgs/{acme_with_child}/children/c1/timeline", params={"days": 500}, headers=ADMIN
        )
        assert response.status_code == 200
        assert len(response.json()["days"]) == 90
