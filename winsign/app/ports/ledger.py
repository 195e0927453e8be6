"""Ledger port interface for audit trail operations."""

from typing import Any, Protocol


class LedgerPort(Protocol):
    """Port interface for audit ledger operations.

    Side effects: Appends to the audit ledger file.
    """

    def log(
        self,
        operation: str,
        inputs: list[str] | None = None,
        outputs: list[str] | None = None,
        args: dict[str, Any] | None = None,
        versions: dict[str, str] | None = None,
    ) -> Any:
        """Append an operation to the audit ledger."""
        ...

    def verify(self) -> tuple[bool, str | None]:
        """Return ``(is_valid, error_message)`` for the hash chain."""
        ...

    def read_all(self) -> list[Any]:
        """Read all audit entries in chronological order."""
        ...
