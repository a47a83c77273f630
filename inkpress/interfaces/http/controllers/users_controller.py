# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from inkpress.application.use_cases.users.manage_users import (
    ChangePasswordUseCase,
    CreateUserUseCase,
    DeleteUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from inkpress.infrastructure.action_guard import action_payload, require_session, server_action
from inkpress.infrastructure.audit import AuditAction, audit_log
from inkpress.interfaces.http.dto.common import ActionResultDTO, parse_dto
from inkpress.interfaces.http.dto.users import (
    ChangePasswordRequestDTO,
    CreateUserRequestDTO,
    DeleteUserRequestDTO,
    UpdateUserRequestDTO,
    UserSummaryDTO,
)


class UsersController:
    def __init__(
        self,
        *,
        list_use_case: ListUsersUseCase,
        create_use_case: CreateUserUseCase,
        update_use_case: UpdateUserUseCase,
        change_password_use_case: ChangePasswordUseCase,
        delete_use_case: DeleteUserUseCase,
    ) -> None:
        self._list = list_use_case
        self._create = create_use_case
        self._update = update_use_case
        self._change_password = change_password_use_case
        self._delete = delete_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        bp.add_url_rule("", view_func=self.list_users, methods=["GET"], endpoint="list")
        bp.add_url_rule("", view_func=self.create_user, methods=["POST"], endpoint="create")
        bp.add_url_rule("/update", view_func=self.update_user, methods=["POST"], endpoint="update")
        bp.add_url_rule(
            "/password", view_func=self.change_password, methods=["POST"], endpoint="password"
        )
        bp.add_url_rule("/delete", view_func=self.delete_user, methods=["POST"], endpoint="delete")
        return bp

    @require_session(admin_only=True)
    def list_users(self):
        users = [UserSummaryDTO.from_domain(u).model_dump(mode="json") for u in self._list.execute()]
        return jsonify({"ok": True, "users": users})

    @server_action(admin_only=True)
    def create_user(self):
        dto = parse_dto(CreateUserRequestDTO, action_payload())
        user = self._create.execute(dto.username, dto.password, email=dto.email, role=dto.role)
        audit_log(
            AuditAction.USER_CREATED,
            user_id=g.identity.subject,
            ip_address=request.remote_addr,
            details={"created_user_id": user.id, "role": user.role.value},
        )
        return jsonify(ActionResultDTO(id=user.id).model_dump(exclude_none=True)), 201

    @server_action(admin_only=True)
    def update_user(self):
        dto = parse_dto(UpdateUserRequestDTO, action_payload())
        user = self._update.execute(
            dto.user_id, email=dto.email, role=dto.role, is_active=dto.is_active
        )
        audit_log(
            AuditAction.USER_UPDATED,
            user_id=g.identity.subject,
            ip_address=request.remote_addr,
            details={"target_user_id": user.id, "role": user.role.value, "active": user.is_active},
        )
        return jsonify(ActionResultDTO(id=user.id).model_dump(exclude_none=True))

    @server_action(admin_only=True)
    def change_password(self):
        dto = parse_dto(ChangePasswordRequestDTO, action_payload())
        self._change_password.execute(dto.user_id, dto.new_password)
        audit_log(
            AuditAction.PASSWORD_CHANGED,
            user_id=g.identity.subject,
            ip_address=request.remote_addr,
            details={"target_user_id": dto.user_id},
        )
        return jsonify(ActionResultDTO().model_dump(exclude_none=True))

    @server_action(admin_only=True)
    def delete_user(self):
        dto = parse_dto(DeleteUserRequestDTO, action_payload())
        self._delete.execute(dto.user_id, actor_id=g.identity.subject)
        audit_log(
            AuditAction.USER_DELETED,
            user_id=g.identity.subject,
            ip_address=request.remote_addr,
            details={"target_user_id": dto.user_id},
        )
        return jsonify(ActionResultDTO().model_dump(exclude_none=True))
