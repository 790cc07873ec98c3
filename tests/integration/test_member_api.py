"""Integration tests for Member API endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.members.models import Member

pytestmark = pytest.mark.integration

MEMBERS_URL = "/api/v1/members/"


@pytest.fixture()
def member():
    return Member.objects.create(name="kim", city="Seoul", street="river", zipcode="123")


class TestMemberList:
    def test_list_wraps_names_in_data(self, auth_client, member):
        Member.objects.create(name="lee")

        response = auth_client.get(MEMBERS_URL)

        assert response.status_code == 200
        assert response.json() == {"data": [{"name": "kim"}, {"name": "lee"}]}

    def test_filter_by_city(self, auth_client, member):
        Member.objects.create(name="lee", city="Busan")

        response = auth_client.get(MEMBERS_URL, {"city": "seoul"})

        assert response.json() == {"data": [{"name": "kim"}]}


class TestMemberCreate:
    def test_create(self, auth_client):
        response = auth_client.post(
            MEMBERS_URL,
            {"name": "park", "address": {"city": "Daegu", "street": "s", "zipcode": "9"}},
            format="json",
        )

        assert response.status_code == 201
        created = Member.objects.get(id=response.json()["id"])
        assert created.name == "park"
        assert created.city == "Daegu"

    def test_duplicate_name(self, auth_client, member):
        response = auth_client.post(MEMBERS_URL, {"name": "kim"}, format="json")
        assert response.status_code == 409

    def test_missing_name(self, auth_client):
        response = auth_client.post(MEMBERS_URL, {}, format="json")

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "name"


class TestMemberRetrieveUpdate:
    def test_retrieve(self, auth_client, member):
        response = auth_client.get(f"{MEMBERS_URL}{member.id}/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "kim"
        assert data["address"] == {"city": "Seoul", "street": "river", "zipcode": "123"}

    def test_retrieve_missing(self, auth_client):
        response = auth_client.get(f"{MEMBERS_URL}{uuid4()}/")
        assert response.status_code == 404

    def test_rename(self, auth_client, member):
        response = auth_client.patch(
            f"{MEMBERS_URL}{member.id}/", {"name": "choi"}, format="json"
        )

        assert response.status_code == 200
        assert response.json() == {"id": str(member.id), "name": "choi"}

    def test_rename_missing(self, auth_client):
        response = auth_client.patch(f"{MEMBERS_URL}{uuid4()}/", {"name": "x"}, format="json")
        assert response.status_code == 404
