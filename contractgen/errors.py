# contractgen/errors.py


class ContractGenError(Exception):
    """Base class for errors raised outside the evaluation path."""


class BlockNotFound(ContractGenError, KeyError):
    def __init__(self, block_id: str):
        super().__init__(block_id)
        self.block_id = block_id

    def __str__(self) -> str:
        return f"Dynamic block not found: {self.block_id}"


class PlaceholderConflict(ContractGenError, ValueError):
    """A second block tried to claim a placeholder that is already taken."""

    def __init__(self, placeholder: str, existing_id: str, new_id: str):
        super().__init__(placeholder)
        self.placeholder = placeholder
        self.existing_id = existing_id
        self.new_id = new_id

    def __str__(self) -> str:
        return (
            f"Placeholder '{self.placeholder}' is already used by block "
            f"'{self.existing_id}' (cannot assign it to '{self.new_id}')"
        )
