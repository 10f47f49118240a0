"""Domain layer DI providers."""

from dishka import Scope, provide

from blog.config import AuthSettings, CommentSettings
from blog.domain.repository import CommentRepository, PostRepository
from blog.domain.service import CommentService, CommentThreadAssembler, JWTService
from blog.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_thread_assembler(
        self, comment_settings: CommentSettings
    ) -> CommentThreadAssembler:
        """Provide the stateless thread assembler."""
        return CommentThreadAssembler(max_depth=comment_settings.max_reply_depth)

    @provide(scope=Scope.APP)
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        post_repository: PostRepository,
        thread_assembler: CommentThreadAssembler,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            post_repository=post_repository,
            thread_assembler=thread_assembler,
        )
