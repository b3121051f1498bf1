"""Admin user directory — search, filter, sort and paginate accounts."""

import math

from protean.utils.globals import current_domain

from identity.user.user import User

PAGE_SIZE = 10
_MAX_ROWS = 1000

SORT_KEYS = ("created_at", "name", "email", "username")


def _sort_value(user, key):
    if key == "created_at":
        return user["created_at"] or ""
    return (user.get(key) or "").lower()


def list_users(search="", blocked="all", sort="created_at", direction="desc", page=1, page_size=PAGE_SIZE):
    users = [u.to_public_dict() for u in current_domain.repository_for(User)._dao.query.limit(_MAX_ROWS).all().items]

    stats = {
        "total": len(users),
        "blocked": sum(1 for u in users if u["blocked"]),
        "admins": sum(1 for u in users if u["role"] == "admin"),
    }

    q = (search or "").strip().lower()
    if q:
        users = [
            u
            for u in users
            if q in (u["name"] or "").lower()
            or q in (u["email"] or "").lower()
            or q in (u["username"] or "").lower()
            or q in u["id"].lower()
        ]

    if blocked == "blocked":
        users = [u for u in users if u["blocked"]]
    elif blocked == "active":
        users = [u for u in users if not u["blocked"]]

    key = sort if sort in SORT_KEYS else "created_at"
    users.sort(key=lambda u: _sort_value(u, key), reverse=direction != "asc")

    total_pages = max(1, math.ceil(len(users) / page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size

    return {
        "users": users[start : start + page_size],
        "page": page,
        "total_pages": total_pages,
        "total": len(users),
        "stats": stats,
    }
