# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Role, SessionClaims, User

__all__ = ["Role", "SessionClaims", "User"]
