"""Storefront management CLI.

Usage:
    python src/manage.py create-admin --username admin --email admin@example.com
    python src/manage.py seed-users

Accounts are written through the identity domain's default database. The
shipped domain.toml uses the in-memory provider, so anything created here is
gone when the command exits; point ``[databases.default]`` at a persistent
provider first. Both commands print a warning while the provider is memory.
"""

import argparse
import getpass
import os
import sys

from protean.exceptions import ValidationError


def _identity():
    from identity.domain import identity

    identity.init()
    return identity


def memory_warning(config):
    """A warning when accounts would only live in this process's memory, else None."""
    provider = config["databases"]["default"]["provider"]
    if provider != "memory":
        return None
    return (
        "WARNING: the identity database provider is 'memory'; accounts created now are "
        "discarded when this command exits. Configure a persistent database in domain.toml."
    )


def _warn_if_ephemeral(identity):
    warning = memory_warning(identity.config)
    if warning:
        print(warning, file=sys.stderr)


def create_admin(username, email, password, name=None):
    """Register an administrator account. Returns the new user id."""
    from identity.user.registration import register_user
    from identity.user.user import UserRole

    identity = _identity()
    _warn_if_ephemeral(identity)
    with identity.domain_context():
        return register_user(username=username, email=email, password=password, name=name, role=UserRole.ADMIN.value)


def seed_users():
    """Create the admin and demo shopper accounts named in the environment."""
    accounts = [
        ("admin", os.getenv("SEED_ADMIN_USERNAME", "admin"), os.getenv("SEED_ADMIN_EMAIL", "admin@example.com")),
        ("user", os.getenv("SEED_USER_USERNAME", "shopper"), os.getenv("SEED_USER_EMAIL", "shopper@example.com")),
    ]
    password = os.getenv("SEED_PASSWORD")
    if not password:
        raise SystemExit("SEED_PASSWORD must be set to seed accounts")

    from identity.user.registration import register_user

    identity = _identity()
    _warn_if_ephemeral(identity)
    created = []
    with identity.domain_context():
        for role, username, email in accounts:
            try:
                register_user(username=username, email=email, password=password, role=role)
            except ValidationError as exc:
                print(f"  skipped {username}: {exc.messages}")
                continue
            created.append(username)
            print(f"  created {role} {username}")
    return created


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    admin_parser = subparsers.add_parser("create-admin", help="Register an administrator account")
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--name")

    subparsers.add_parser("seed-users", help="Create the admin and demo shopper accounts")

    args = parser.parse_args()

    if args.command == "create-admin":
        password = getpass.getpass("Password: ")
        try:
            user_id = create_admin(args.username, args.email, password, name=args.name)
        except ValidationError as exc:
            print(f"Could not create admin: {exc.messages}", file=sys.stderr)
            sys.exit(1)
        print(f"Admin {args.username} created ({user_id}).")
    elif args.command == "seed-users":
        seed_users()
        print("Done.")


if __name__ == "__main__":
    main()
