#!/usr/bin/env python3
"""Generate JWT bearer tokens for manual API testing.

Run with:
    python scripts/generate_test_token.py --subject <user-id> --role admin
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import argparse

from src.core.auth import Role, create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--subject", default="admin-test", help="User id placed in the sub claim")
    parser.add_argument(
        "--role",
        action="append",
        choices=Role.values(),
        help="Role to grant; repeat for several roles (default: admin)",
    )
    parser.add_argument("--email", default=None)
    args = parser.parse_args()

    roles = args.role or [Role.ADMIN.value]
    token = create_access_token(args.subject, roles=roles, email=args.email)
    print(f"Token for {args.subject} ({', '.join(roles)}):\n{token}")


if __name__ == "__main__":
    main()
