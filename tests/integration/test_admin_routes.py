"""Integration tests for the admin endpoints."""

from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient
from src.core.auth import Role

from tests.utils import (
    INSTRUCTOR_ID,
    MISSING_ID,
    OTHER_STUDENT_ID,
    PENDING_INSTRUCTOR_ID,
    STUDENT_ID,
    admin_headers,
    auth_headers,
)

API = "/api/v1/admin"


async def _assign(client: AsyncClient, user_id: str, role: str) -> str:
    response = await client.post(
        f"{API}/assignations",
        json={"userId": user_id, "role": role},
        headers=admin_headers(),
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]


class TestAdminAccess:
    @pytest.mark.asyncio
    async def test_missing_token_is_unauthorized(self, async_client: AsyncClient) -> None:
        response = await async_client.get(f"{API}/roles")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_non_admin_is_forbidden(self, async_client: AsyncClient) -> None:
        response = await async_client.get(f"{API}/assignations", headers=auth_headers())

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestAssignations:
    @pytest.mark.asyncio
    async def test_assign_update_revoke_by_id(self, async_client: AsyncClient) -> None:
        assignment_id = await _assign(async_client, INSTRUCTOR_ID, "instructor")

        response = await async_client.put(
            f"{API}/assignations/{assignment_id}",
            json={"status": "suspended"},
            headers=admin_headers(),
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["status"] == "suspended"
        assert data["role_name"] == "instructor"
        assert data["user_id"] == INSTRUCTOR_ID

        response = await async_client.delete(
            f"{API}/assignations/{assignment_id}", headers=admin_headers()
        )
        assert response.status_code == status.HTTP_200_OK

        response = await async_client.delete(
            f"{API}/assignations/{assignment_id}", headers=admin_headers()
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        body = response.json()
        assert body["success"] is False
        assert body["kind"] == "AssignmentNotFound"
        assert body["error"]
        assert body["timestamp"]

    @pytest.mark.asyncio
    async def test_duplicate_assign_conflicts(self, async_client: AsyncClient) -> None:
        await _assign(async_client, STUDENT_ID, "student")

        response = await async_client.post(
            f"{API}/assignations",
            json={"userId": STUDENT_ID, "role": "student"},
            headers=admin_headers(),
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["kind"] == "DuplicateAssignment"

    @pytest.mark.asyncio
    async def test_assign_validation_errors(self, async_client: AsyncClient) -> None:
        invalid_role = await async_client.post(
            f"{API}/assignations",
            json={"userId": STUDENT_ID, "role": "tutor"},
            headers=admin_headers(),
        )
        missing_user = await async_client.post(
            f"{API}/assignations",
            json={"userId": MISSING_ID, "role": "student"},
            headers=admin_headers(),
        )

        assert invalid_role.status_code == status.HTTP_400_BAD_REQUEST
        assert invalid_role.json()["kind"] == "InvalidRole"
        assert missing_user.status_code == status.HTTP_404_NOT_FOUND
        assert missing_user.json()["kind"] == "UserNotFound"

    @pytest.mark.asyncio
    async def test_update_and_revoke_by_user_and_role(self, async_client: AsyncClient) -> None:
        await _assign(async_client, STUDENT_ID, "student")

        response = await async_client.put(
            f"{API}/assignations/user/{STUDENT_ID}/role/student",
            json={"expiresAt": "2030-01-01T00:00:00+00:00"},
            headers=admin_headers(),
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["expires_at"].startswith("2030-01-01")
        assert data["status"] == "active"

        response = await async_client.delete(
            f"{API}/assignations/user/{STUDENT_ID}/role/student", headers=admin_headers()
        )
        assert response.status_code == status.HTTP_200_OK

        response = await async_client.delete(
            f"{API}/assignations/user/{STUDENT_ID}/role/student", headers=admin_headers()
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_with_empty_or_unknown_fields(self, async_client: AsyncClient) -> None:
        assignment_id = await _assign(async_client, STUDENT_ID, "student")

        empty = await async_client.put(
            f"{API}/assignations/{assignment_id}", json={}, headers=admin_headers()
        )
        unknown = await async_client.put(
            f"{API}/assignations/{assignment_id}",
            json={"role": "admin"},
            headers=admin_headers(),
        )

        assert empty.status_code == status.HTTP_400_BAD_REQUEST
        assert empty.json()["kind"] == "NoFieldsProvided"
        assert unknown.status_code == status.HTTP_400_BAD_REQUEST
        assert unknown.json()["kind"] == "InvalidField"

    @pytest.mark.asyncio
    async def test_list_pagination_envelope(self, async_client: AsyncClient) -> None:
        await _assign(async_client, STUDENT_ID, "student")
        await _assign(async_client, OTHER_STUDENT_ID, "student")
        await _assign(async_client, INSTRUCTOR_ID, "instructor")

        response = await async_client.get(
            f"{API}/assignations",
            params={"page": 2, "size": 2, "role": "student", "sort": "assigned_at"},
            headers=admin_headers(),
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Role assignations retrieved successfully"
        assert body["pagination"] == {
            "page": 2,
            "limit": 2,
            "total": 2,
            "totalPages": 1,
            "hasNext": False,
            "hasPrev": True,
        }
        assert body["data"] == []

    @pytest.mark.asyncio
    async def test_list_rows_include_assignee(self, async_client: AsyncClient) -> None:
        await _assign(async_client, STUDENT_ID, "student")

        response = await async_client.get(f"{API}/assignations", headers=admin_headers())

        row = response.json()["data"][0]
        assert row["user_email"] == "student@example.com"
        assert row["user_first_name"] == "Sam"
        assert row["user_last_name"] == "Student"

    @pytest.mark.asyncio
    async def test_list_rejects_invalid_sort_and_size(self, async_client: AsyncClient) -> None:
        bad_sort = await async_client.get(
            f"{API}/assignations", params={"sort": "not_a_real_field"}, headers=admin_headers()
        )
        too_large = await async_client.get(
            f"{API}/assignations", params={"size": 1000}, headers=admin_headers()
        )
        inverted = await async_client.get(
            f"{API}/assignations",
            params={"assigned_from": "2025-02-01T00:00:00", "assigned_to": "2025-01-01T00:00:00"},
            headers=admin_headers(),
        )

        assert bad_sort.status_code == status.HTTP_400_BAD_REQUEST
        assert bad_sort.json()["kind"] == "InvalidSortField"
        assert too_large.status_code == status.HTTP_400_BAD_REQUEST
        assert too_large.json()["kind"] == "InvalidPagination"
        assert inverted.status_code == status.HTTP_400_BAD_REQUEST
        assert inverted.json()["kind"] == "InvalidField"


class TestRoles:
    @pytest.mark.asyncio
    async def test_list_and_get_roles(self, async_client: AsyncClient) -> None:
        listing = await async_client.get(
            f"{API}/roles", params={"order": "asc"}, headers=admin_headers()
        )
        single = await async_client.get(f"{API}/roles/admin", headers=admin_headers())

        assert [role["name"] for role in listing.json()["data"]] == [
            Role.ADMIN.value,
            Role.INSTRUCTOR.value,
            Role.STUDENT.value,
        ]
        assert single.json()["data"]["name"] == "admin"

    @pytest.mark.asyncio
    async def test_create_duplicate_role_conflicts(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            f"{API}/roles", json={"name": "student"}, headers=admin_headers()
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["kind"] == "DuplicateRole"

    @pytest.mark.asyncio
    async def test_update_and_delete_role(self, async_client: AsyncClient) -> None:
        updated = await async_client.put(
            f"{API}/roles/student",
            json={"description": "Learner"},
            headers=admin_headers(),
        )
        deleted = await async_client.delete(f"{API}/roles/student", headers=admin_headers())
        missing = await async_client.get(f"{API}/roles/student", headers=admin_headers())

        assert updated.json()["data"]["description"] == "Learner"
        assert deleted.status_code == status.HTTP_200_OK
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert missing.json()["kind"] == "RoleNotFound"


class TestInstructors:
    @pytest.mark.asyncio
    async def test_list_with_filters(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            f"{API}/instructors",
            params={"verification_status": "verified", "min_total_reviews": 10},
            headers=admin_headers(),
        )

        body = response.json()
        assert response.status_code == status.HTTP_200_OK
        assert [item["id"] for item in body["data"]] == [INSTRUCTOR_ID]
        assert body["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_create_update_delete(self, async_client: AsyncClient) -> None:
        created = await async_client.post(
            f"{API}/instructors", json={"instructorId": STUDENT_ID}, headers=admin_headers()
        )
        assert created.status_code == status.HTTP_201_CREATED
        assert created.json()["data"]["verification_status"] == "pending"

        updated = await async_client.put(
            f"{API}/instructors/{STUDENT_ID}",
            json={"verificationStatus": "rejected"},
            headers=admin_headers(),
        )
        assert updated.json()["data"]["verification_status"] == "rejected"

        deleted = await async_client.delete(
            f"{API}/instructors/{STUDENT_ID}", headers=admin_headers()
        )
        assert deleted.status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_duplicate_instructor_conflicts(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            f"{API}/instructors",
            json={"instructorId": PENDING_INSTRUCTOR_ID},
            headers=admin_headers(),
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["kind"] == "DuplicateInstructor"
