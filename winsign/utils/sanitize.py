"""Helpers that keep secrets out of logged command lines."""

from __future__ import annotations

import subprocess
from collections.abc import Iterable, Sequence

MASK = "***"


def mask_arguments(args: Sequence[str], secrets: Iterable[str] = ()) -> list[str]:
    """Replace every argument equal to one of ``secrets`` with ``***``.

    Empty secrets are ignored so an empty password does not mask blank
    arguments.
    """
    hidden = {secret for secret in secrets if secret}
    return [MASK if arg in hidden else arg for arg in args]


def format_command(args: Sequence[str], secrets: Iterable[str] = ()) -> str:
    """Render ``args`` as a Windows command line with secrets masked."""
    return subprocess.list2cmdline(mask_arguments([str(arg) for arg in args], secrets))
