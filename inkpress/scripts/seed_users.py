# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Create the first admin account on an empty database."""

from __future__ import annotations

import argparse
import secrets
import sys

from inkpress.application.services.password_hashing import WerkzeugPasswordHasher
from inkpress.application.use_cases.users.manage_users import CreateUserUseCase
from inkpress.domain.users.entities import Role, User
from inkpress.domain.users.repositories import PasswordHasher, UserRepository
from inkpress.infrastructure.db import Database
from inkpress.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from inkpress.shared.config import load_config
from inkpress.shared.logging import logger, setup_logging


def seed_admin(
    users: UserRepository,
    password_hasher: PasswordHasher,
    username: str,
) -> tuple[User, str] | None:
    """Return the created admin and its one-time password, or None if users exist."""
    existing = users.count()
    if existing:
        logger.info(f"seed: {existing} users already present, skipping")
        return None

    password = secrets.token_hex(16)
    user = CreateUserUseCase(users=users, password_hasher=password_hasher).execute(
        username, password, role=Role.ADMIN
    )
    logger.info(f"seed: created admin user_id={user.id}")
    return user, password


def main(argv: list[str] | None = None) -> int:
    config = load_config()
    parser = argparse.ArgumentParser(description="Seed the initial admin account")
    parser.add_argument(
        "--username",
        default=config.seed_admin_username,
        help="Admin username (default: SEED_ADMIN_USERNAME)",
    )
    args = parser.parse_args(argv)

    setup_logging(debug_mode=config.debug_logging)
    database = Database(config.database)
    try:
        database.init_schema()
        seeded = seed_admin(
            SqlAlchemyUserRepository(database), WerkzeugPasswordHasher(), args.username
        )
    finally:
        database.dispose()

    if seeded is None:
        print("Users already exist; nothing to do. Empty the users table to re-seed.")
        return 0

    user, password = seeded
    print("Admin account created:")
    print(f"  username: {user.username}")
    print(f"  password: {password}")
    print("This password is shown only once. Log in and change it immediately.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
