# scripts/dev_jwt_token.py
"""Print a long-lived session token for local testing of the admin API.

    python -m scripts.dev_jwt_token [user_id] [role]
"""
import sys
from datetime import timedelta

from app.shared.utils.security import create_access_token


def main(argv):
    user_id = argv[1] if len(argv) > 1 else "moderator_1"
    role = argv[2] if len(argv) > 2 else "MODERATOR"
    token = create_access_token(
        {"sub": user_id, "role": role, "permissions": ["MODERATE_CONTENT"]},
        timedelta(days=30),
    )
    print(token)


if __name__ == "__main__":
    main(sys.argv)
