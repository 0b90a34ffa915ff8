from __future__ import annotations

from src.core.auth import Role

ROLE_DEFINITIONS = [
    {
        "name": Role.ADMIN,
        "description": "Platform administration: roles, assignations and instructor verification.",
    },
    {
        "name": Role.INSTRUCTOR,
        "description": "Publishes courses and receives instructor reviews.",
    },
    {
        "name": Role.STUDENT,
        "description": "Enrolls in courses and reviews instructors and courses.",
    },
]
