from __future__ import annotations

from src.core.auth import Role, create_access_token

ADMIN_ID = "00000000-0000-0000-0000-000000000001"
STUDENT_ID = "00000000-0000-0000-0000-000000000002"
INSTRUCTOR_ID = "00000000-0000-0000-0000-000000000003"
OTHER_STUDENT_ID = "00000000-0000-0000-0000-000000000004"
PENDING_INSTRUCTOR_ID = "00000000-0000-0000-0000-000000000005"
COURSE_ID = "course-9"
MISSING_ID = "ffffffff-ffff-ffff-ffff-ffffffffffff"


def auth_headers(user_id: str = STUDENT_ID, role: Role = Role.STUDENT) -> dict[str, str]:
    token = create_access_token(user_id, roles=[role], email=f"{role.value}@example.com")
    return {"Authorization": f"Bearer {token}"}


def admin_headers() -> dict[str, str]:
    return auth_headers(ADMIN_ID, Role.ADMIN)
