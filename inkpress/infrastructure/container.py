# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from inkpress.application.services.password_hashing import WerkzeugPasswordHasher
from inkpress.application.use_cases.content import (
    CreateCategoryUseCase,
    CreatePostUseCase,
    CreateProjectUseCase,
    DeleteCategoryUseCase,
    DeletePostUseCase,
    DeleteProjectUseCase,
    GetPostUseCase,
    GetProjectUseCase,
    ListCategoriesUseCase,
    ListPostsUseCase,
    ListProjectsUseCase,
    UpdateCategoryUseCase,
    UpdatePostUseCase,
    UpdateProjectUseCase,
)
from inkpress.application.use_cases.users.login_user import LoginUserUseCase
from inkpress.application.use_cases.users.manage_users import (
    ChangePasswordUseCase,
    CreateUserUseCase,
    DeleteUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from inkpress.infrastructure.auth.login_attempts import (
    AttemptStore,
    InMemoryAttemptStore,
    LoginRateLimiter,
)
from inkpress.infrastructure.auth.session_codec import SessionCodec
from inkpress.infrastructure.db import Database
from inkpress.infrastructure.repositories.sqlalchemy import (
    SqlAlchemyCategoryRepository,
    SqlAlchemyPostRepository,
    SqlAlchemyProjectRepository,
)
from inkpress.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from inkpress.interfaces.http.controllers.auth_controller import AuthController
from inkpress.interfaces.http.controllers.content_controller import (
    CategoriesController,
    PostsController,
    ProjectsController,
)
from inkpress.interfaces.http.controllers.misc_controller import MiscController
from inkpress.interfaces.http.controllers.pages_controller import PagesController
from inkpress.interfaces.http.controllers.theme_controller import ThemeController
from inkpress.interfaces.http.controllers.users_controller import UsersController
from inkpress.shared.config import AppConfig
from inkpress.shared.middleware.request_gate import RequestGate


class Container:
    def __init__(self, config: AppConfig, *, database: Database | None = None) -> None:
        self.config = config
        if database is not None:
            self.__dict__["database"] = database

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def session_codec(self) -> SessionCodec:
        return SessionCodec(
            self.config.auth.secret,
            production=self.config.is_production(),
            ttl=timedelta(seconds=self.config.auth.session_ttl_seconds),
        )

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def attempt_store(self) -> AttemptStore:
        return InMemoryAttemptStore()

    @cached_property
    def login_rate_limiter(self) -> LoginRateLimiter:
        return LoginRateLimiter(
            self.attempt_store,
            max_attempts=self.config.auth.login_max_attempts,
            window_seconds=self.config.auth.login_window_seconds,
        )

    @cached_property
    def request_gate(self) -> RequestGate:
        return RequestGate(
            self.session_codec,
            supported_locales=self.config.locale.supported,
            default_locale=self.config.locale.default,
            secure_cookies=self.config.secure_cookies(),
        )

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def post_repository(self) -> SqlAlchemyPostRepository:
        return SqlAlchemyPostRepository(self.database)

    @cached_property
    def project_repository(self) -> SqlAlchemyProjectRepository:
        return SqlAlchemyProjectRepository(self.database)

    @cached_property
    def category_repository(self) -> SqlAlchemyCategoryRepository:
        return SqlAlchemyCategoryRepository(self.database)

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=LoginUserUseCase(
                users=self.user_repository,
                password_hasher=self.password_hasher,
                codec=self.session_codec,
                limiter=self.login_rate_limiter,
            ),
            secure_cookies=self.config.secure_cookies(),
            trust_proxy_headers=self.config.security.trust_proxy_headers,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            list_use_case=ListUsersUseCase(self.user_repository),
            create_use_case=CreateUserUseCase(
                users=self.user_repository, password_hasher=self.password_hasher
            ),
            update_use_case=UpdateUserUseCase(self.user_repository),
            change_password_use_case=ChangePasswordUseCase(
                users=self.user_repository, password_hasher=self.password_hasher
            ),
            delete_use_case=DeleteUserUseCase(self.user_repository),
        )

    @cached_property
    def posts_controller(self) -> PostsController:
        return PostsController(
            list_use_case=ListPostsUseCase(self.post_repository),
            get_use_case=GetPostUseCase(self.post_repository),
            create_use_case=CreatePostUseCase(self.post_repository),
            update_use_case=UpdatePostUseCase(self.post_repository),
            delete_use_case=DeletePostUseCase(self.post_repository),
        )

    @cached_property
    def projects_controller(self) -> ProjectsController:
        return ProjectsController(
            list_use_case=ListProjectsUseCase(self.project_repository),
            get_use_case=GetProjectUseCase(self.project_repository),
            create_use_case=CreateProjectUseCase(
                projects=self.project_repository, categories=self.category_repository
            ),
            update_use_case=UpdateProjectUseCase(
                projects=self.project_repository, categories=self.category_repository
            ),
            delete_use_case=DeleteProjectUseCase(self.project_repository),
        )

    @cached_property
    def categories_controller(self) -> CategoriesController:
        return CategoriesController(
            list_use_case=ListCategoriesUseCase(self.category_repository),
            create_use_case=CreateCategoryUseCase(self.category_repository),
            update_use_case=UpdateCategoryUseCase(self.category_repository),
            delete_use_case=DeleteCategoryUseCase(
                categories=self.category_repository, projects=self.project_repository
            ),
        )

    @cached_property
    def theme_controller(self) -> ThemeController:
        return ThemeController(secure_cookies=self.config.secure_cookies())

    @cached_property
    def pages_controller(self) -> PagesController:
        return PagesController(
            posts=self.post_repository,
            projects=self.project_repository,
            categories=self.category_repository,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(self.database.engine)

    def controllers(self) -> tuple:
        return (
            self.misc_controller,
            self.pages_controller,
            self.auth_controller,
            self.users_controller,
            self.posts_controller,
            self.projects_controller,
            self.categories_controller,
            self.theme_controller,
        )
