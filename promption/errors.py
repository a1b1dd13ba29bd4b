from pathlib import Path


class PromptionError(Exception):
    """Base user-facing application error."""


class ValidationError(PromptionError):
    pass


class UnknownItemKindError(ValidationError):
    def __init__(self, item_id: str, kind: str) -> None:
        self.item_id = item_id
        self.kind = kind
        super().__init__(
            f"Item {item_id} has unknown kind '{kind}' "
            "(expected skill, rule or workflow)"
        )


class ConflictError(PromptionError):
    pass


class NotFoundError(PromptionError):
    pass


class StoreError(PromptionError):
    pass


class ProjectionFileError(PromptionError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MissingDatabaseError(ProjectionFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Promption database not found")


class InvalidConfigDocumentError(ProjectionFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config document ({detail})")


class PartialMatchWarning(UserWarning):
    """Some requested ids did not resolve to a record."""

    def __init__(self, record: str, found: int, expected: int, missing: list[str]) -> None:
        self.record = record
        self.found = found
        self.expected = expected
        self.missing = missing
        super().__init__(
            f"Found {found} {record}(s), expected {expected} "
            f"(unresolved: {', '.join(missing)})"
        )
