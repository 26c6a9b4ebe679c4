"""Domain exceptions."""


class RuleGateError(Exception):
    """Base exception for RuleGate."""

    pass


class PermissionDenied(RuleGateError):
    """User does not have permission for the requested action."""

    pass


class NotAuthenticated(RuleGateError):
    """No acting user could be resolved for the request."""

    pass


class NotFound(RuleGateError):
    """Requested entity was not found."""

    def __init__(self, entity: str, identifier: object = None) -> None:
        self.entity = entity
        self.identifier = identifier
        message = f"{entity} {identifier} not found" if identifier is not None else f"{entity} not found"
        super().__init__(message)


class ResourceNotFound(PermissionDenied):
    """Resource targeted by an ownership check does not exist."""

    pass


class NotOwner(PermissionDenied):
    """User is not the resource owner and has no override permission."""

    pass


class ValidationError(RuleGateError):
    """Validation failed for input data."""

    pass


class RuleStoreInitError(RuleGateError):
    """Rule store could not be loaded from the role/permission read model."""

    pass


class MutationError(RuleGateError):
    """A role or permission mutation failed.

    The message names the operation and the target id only; the underlying
    cause is chained and logged, never exposed to the caller.
    """

    def __init__(self, operation: str, target_id: object) -> None:
        self.operation = operation
        self.target_id = target_id
        super().__init__(f"Error {operation} ({target_id})")


class AddPermissionError(MutationError):
    """Adding a permission to a role failed."""

    def __init__(self, role_id: object) -> None:
        super().__init__("adding permission to role", role_id)


class RemovePermissionError(MutationError):
    """Removing a permission from a role failed."""

    def __init__(self, role_id: object, permission_id: object) -> None:
        super().__init__("removing permission from role", f"{role_id}/{permission_id}")


class UpdatePermissionError(MutationError):
    """Updating a permission failed."""

    def __init__(self, permission_id: object) -> None:
        super().__init__("updating permission", permission_id)


class RoleMutationError(MutationError):
    """Creating, updating or deleting a role failed."""

    pass


class AccountRoleError(MutationError):
    """Reassigning an account's role failed."""

    def __init__(self, account_id: object) -> None:
        super().__init__("reassigning role of account", account_id)
