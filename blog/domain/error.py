"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidRelationError(DomainError):
    """Raised when a reply targets a parent comment on a different post."""

    def __init__(self, parent_id: str, post_id: str):
        self.parent_id = parent_id
        self.post_id = post_id
        super().__init__(
            f"Parent comment {parent_id} does not belong to post {post_id}"
        )


class NotAuthorizedError(DomainError):
    """Raised when an actor attempts an operation their role does not allow."""

    def __init__(self, action: str, resource: str, resource_id: str, user_id: str):
        self.action = action
        super().__init__(
            f"User {user_id} is not authorized to {action} {resource} {resource_id}"
        )
