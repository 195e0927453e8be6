"""Per-run state shared between the pipeline and the signing service."""

from __future__ import annotations

from dataclasses import dataclass, field

from winsign.app.ports import SigningToolInfo, SigningToolLocatorPort


@dataclass(slots=True)
class SigningContext:
    """Owns the memoized signtool lookup for one pipeline run."""

    locator: SigningToolLocatorPort
    _tool_info: SigningToolInfo | None = field(default=None, init=False, repr=False)

    def tool_info(self) -> SigningToolInfo:
        """Locate signtool on first use and reuse the answer afterwards."""
        if self._tool_info is None:
            self._tool_info = self.locator.locate()
        return self._tool_info

    def reset_tool_info(self) -> None:
        """Forget the cached lookup so the next call locates again."""
        self._tool_info = None
