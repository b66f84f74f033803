"""Tests for the tenancy repositories."""

from modules.access.models import MembershipStatus, OrganizationType, Role
from modules.access.repository import default_display_name


class TestMembershipRepository:
    async def test_upsert_keeps_single_record_and_joined_at(self, container):
        repo = container.memberships
        first = await repo.upsert("org1", "u1", Role.SPECIALIST)
        second = await repo.upsert("org1", "u1", Role.ORG_ADMIN)
        assert second.role == Role.ORG_ADMIN
        assert second.joined_at == first.joined_at
        assert len(await repo.list_for_org("org1", status=None)) == 1

    async def test_list_filters(self, container):
        repo = container.memberships
        await repo.upsert("org1", "a", Role.ORG_ADMIN)
        await repo.upsert("org1", "b", Role.SPECIALIST)
        await repo.upsert("org1", "c", Role.SPECIALIST, MembershipStatus.INACTIVE)
        await repo.upsert("org2", "a", Role.SPECIALIST)

        assert {m.uid for m in await repo.list_for_org("org1")} == {"a", "b"}
        assert [m.uid for m in await repo.list_for_org("org1", role=Role.SPECIALIST)] == ["b"]
        assert {m.org_id for m in await repo.list_for_user("a")} == {"org1", "org2"}

    async def test_grant_only_once(self, container):
        repo = container.memberships
        assert await repo.grant("org1", "u1", Role.SPECIALIST) == (True, None)
        assert await repo.grant("org1", "u1", Role.ORG_ADMIN) == (False, None)
        assert (await repo.get("org1", "u1")).role == Role.SPECIALIST

    async def test_grant_reactivates_and_restore_reverts(self, container):
        repo = container.memberships
        await repo.upsert("org1", "u1", Role.ORG_ADMIN, MembershipStatus.INACTIVE)

        granted, previous = await repo.grant("org1", "u1", Role.SPECIALIST)
        assert granted
        assert previous["status"] == MembershipStatus.INACTIVE.value
        assert (await repo.get("org1", "u1")).is_active

        await repo.restore("org1", "u1", previous)
        restored = await repo.get("org1", "u1")
        assert restored.status == MembershipStatus.INACTIVE
        assert restored.role == Role.ORG_ADMIN

    async def test_restore_removes_created_membership(self, container):
        repo = container.memberships
        _, previous = await repo.grant("org1", "u1", Role.SPECIALIST)
        await repo.restore("org1", "u1", previous)
        assert await repo.get("org1", "u1") is None


class TestOrganizationRepository:
    async def test_create_and_find(self, container):
        repo = container.organizations
        org = await repo.create("Acme", created_by="op", org_type=OrganizationType.PERSONAL)
        assert org.is_active
        assert org.type == OrganizationType.PERSONAL
        assert (await repo.find_by_name("Acme", created_by="op")).id == org.id
        assert await repo.find_by_name("Acme", created_by="other") is None
        assert [o.id for o in await repo.list_by_creator("op")] == [org.id]


class TestChildLinkRepository:
    async def test_list_only_assigned_links(self, container):
        repo = container.child_links
        await repo.upsert("org1", "c1", assigned=True, parent_user_id="p1")
        await repo.upsert("org1", "c2", assigned=False)
        await repo.upsert("org1", "c3", assigned=True, assigned_specialist_id="s1")

        assert {link.child_id for link in await repo.list_for_org("org1")} == {"c1", "c3"}
        assert [link.child_id for link in await repo.list_for_org("org1", specialist_id="s1")] == ["c3"]
        assert [link.child_id for link in await repo.list_for_org("org1", parent_user_id="p1")] == ["c1"]

    async def test_set_assignment_merges(self, container):
        repo = container.child_links
        await repo.upsert("org1", "c1", assigned=True, parent_user_id="p1")
        link = await repo.set_assignment("org1", "c1", "s1")
        assert link.assigned_specialist_id == "s1"
        assert link.parent_user_id == "p1"
        link = await repo.set_assignment("org1", "c1", None)
        assert link.assigned_specialist_id is None
        assert link.assigned


class TestSpecialistRepository:
    async def test_upsert_defaults_name_from_email(self, container):
        profile = await container.specialists.upsert("u1", email="jane.doe@clinic.test")
        assert profile.name == "jane.doe"
        updated = await container.specialists.upsert("u1", name="Jane", role=Role.ORG_ADMIN)
        assert updated.name == "Jane"
        assert updated.email == "jane.doe@clinic.test"
        assert updated.role == Role.ORG_ADMIN

    def test_default_display_name(self):
        assert default_display_name("") == "Specialist"
        assert default_display_name("x@y.z") == "x"
