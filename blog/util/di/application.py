"""Application layer DI providers."""

from dishka import Scope, provide

from blog.application.usecase.comment import (
    CreateCommentUseCase,
    DeleteCommentUseCase,
    GetCommentsUseCase,
    GetCommentUseCase,
    ListUserCommentsUseCase,
    ModerateCommentUseCase,
    SearchCommentsUseCase,
    UpdateCommentUseCase,
)
from blog.domain.repository import PostRepository, UserRepository
from blog.domain.service import CommentService
from blog.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self, comment_service: CommentService
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_get_comments_use_case(
        self, comment_service: CommentService, user_repository: UserRepository
    ) -> GetCommentsUseCase:
        """Provide get comments use case."""
        return GetCommentsUseCase(
            comment_service=comment_service, user_repository=user_repository
        )

    @provide(scope=Scope.REQUEST)
    def get_get_comment_use_case(
        self, comment_service: CommentService, user_repository: UserRepository
    ) -> GetCommentUseCase:
        """Provide get comment use case."""
        return GetCommentUseCase(
            comment_service=comment_service, user_repository=user_repository
        )

    @provide(scope=Scope.REQUEST)
    def get_list_user_comments_use_case(
        self,
        comment_service: CommentService,
        post_repository: PostRepository,
        user_repository: UserRepository,
    ) -> ListUserCommentsUseCase:
        """Provide list user comments use case."""
        return ListUserCommentsUseCase(
            comment_service=comment_service,
            post_repository=post_repository,
            user_repository=user_repository,
        )

    @provide(scope=Scope.REQUEST)
    def get_search_comments_use_case(
        self, comment_service: CommentService, user_repository: UserRepository
    ) -> SearchCommentsUseCase:
        """Provide search comments use case."""
        return SearchCommentsUseCase(
            comment_service=comment_service, user_repository=user_repository
        )

    @provide(scope=Scope.REQUEST)
    def get_update_comment_use_case(
        self, comment_service: CommentService
    ) -> UpdateCommentUseCase:
        """Provide update comment use case."""
        return UpdateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_moderate_comment_use_case(
        self, comment_service: CommentService
    ) -> ModerateCommentUseCase:
        """Provide moderate comment use case."""
        return ModerateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)
