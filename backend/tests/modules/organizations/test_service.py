"""Tests for self-serve organizations, team listing, parent contacts and profile."""

import pytest

from modules.access.exceptions import (
    NotAMemberError,
    OrgAdminRequiredError,
    OrganizationNotFoundError,
)
from modules.access.models import OrganizationType, Role
from modules.organizations.exceptions import ParentContactNotFoundError
from modules.organizations.models import (
    CreateOrganizationRequest,
    CreateParentContactRequest,
    UpdateParentContactRequest,
    UpdateProfileRequest,
)

from support import make_user

ADMIN = make_user("boss")
SPECIALIST = make_user("spec")


@pytest.fixture
def orgs(container):
    return container.organization_service


@pytest.fixture
async def org_id(seed):
    org_id = await seed.org(name="Acme")
    await seed.member(org_id, "boss", Role.ORG_ADMIN, name="Boss")
    await seed.member(org_id, "spec", Role.SPECIALIST, name="Dr. Spec")
    return org_id


class TestCreateOrganization:
    async def test_creator_becomes_org_admin(self, orgs, container):
        user = make_user("founder", email="founder@clinic.test", name="Fran")
        summary = await orgs.create_organization(user, CreateOrganizationRequest())

        assert summary.name == "Fran's Practice"
        assert summary.type == OrganizationType.PERSONAL
        assert summary.role == Role.ORG_ADMIN
        membership = await container.memberships.get(summary.id, "founder")
        assert membership.role == Role.ORG_ADMIN
        profile = await container.specialists.get("founder")
        assert profile.org_id == summary.id

    async def test_explicit_name(self, orgs):
        summary = await orgs.create_organization(
            make_user("founder"), CreateOrganizationRequest(name="Bright Steps", country="KZ")
        )
        assert summary.name == "Bright Steps"
        assert summary.country == "KZ"


class TestGetOrganization:
    async def test_member_view(self, orgs, org_id):
        summary = await orgs.get_organization(SPECIALIST, org_id)
        assert summary.name == "Acme"
        assert summary.role == Role.SPECIALIST

    async def test_missing_org(self, orgs):
        with pytest.raises(OrganizationNotFoundError):
            await orgs.get_organization(ADMIN, "nope")

    async def test_non_member(self, orgs, org_id):
        with pytest.raises(NotAMemberError):
            await orgs.get_organization(make_user("stranger"), org_id)


class TestTeam:
    async def test_lists_active_members(self, orgs, org_id):
        team = await orgs.list_team(ADMIN, org_id)
        assert {(m.uid, m.role) for m in team} == {
            ("boss", Role.ORG_ADMIN),
            ("spec", Role.SPECIALIST),
        }
        assert {m.name for m in team} == {"Boss", "Dr. Spec"}

    async def test_admin_only(self, orgs, org_id):
        with pytest.raises(OrgAdminRequiredError):
            await orgs.list_team(SPECIALIST, org_id)


class TestParentContacts:
    async def test_crud(self, orgs, org_id):
        contact = await orgs.create_parent_contact(
            ADMIN,
            org_id,
            CreateParentContactRequest.model_validate(
                {"name": "Pat", "email": "pat@example.com", "childIds": ["c1"]}
            ),
        )
        assert contact.linked_children == ["c1"]

        updated = await orgs.update_parent_contact(
            ADMIN, org_id, contact.id, UpdateParentContactRequest(phone="+7 700 000")
        )
        assert updated.phone == "+7 700 000"
        assert updated.name == "Pat"

        assert [c.id for c in await orgs.list_parent_contacts(ADMIN, org_id)] == [contact.id]
        await orgs.delete_parent_contact(ADMIN, org_id, contact.id)
        assert await orgs.list_parent_contacts(ADMIN, org_id) == []

    async def test_contact_of_another_org(self, orgs, seed, org_id):
        other = await seed.org(name="Other")
        await seed.member(other, "boss", Role.ORG_ADMIN)
        contact = await orgs.create_parent_contact(
            ADMIN, other, CreateParentContactRequest(name="Pat")
        )
        with pytest.raises(ParentContactNotFoundError):
            await orgs.delete_parent_contact(ADMIN, org_id, contact.id)

    async def test_specialists_cannot_manage_contacts(self, orgs, org_id):
        with pytest.raises(OrgAdminRequiredError):
            await orgs.list_parent_contacts(SPECIALIST, org_id)


class TestProfileAndSession:
    async def test_me_lists_organizations(self, orgs, org_id):
        me = await orgs.get_me(SPECIALIST)
        assert me.name == "Dr. Spec"
        assert me.is_super_admin is False
        assert [(o.org_id, o.org_name, o.role) for o in me.organizations] == [
            (org_id, "Acme", Role.SPECIALIST)
        ]

    async def test_me_for_unknown_user_falls_back_to_email(self, orgs):
        me = await orgs.get_me(make_user("new", email="new.person@example.com"))
        assert me.name == "new.person"
        assert me.organizations == []

    async def test_update_me(self, orgs, org_id):
        profile = await orgs.update_me(SPECIALIST, UpdateProfileRequest(name="Dr. S"))
        assert profile.name == "Dr. S"
        assert (await orgs.get_me(SPECIALIST)).name == "Dr. S"

    async def test_session(self, orgs, org_id):
        session = await orgs.get_session(SPECIALIST)
        assert session.has_org
        assert session.org_id == org_id
        assert (await orgs.get_session(make_user("nobody"))).has_org is False
