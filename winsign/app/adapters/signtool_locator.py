"""Locate signtool.exe inside a Windows Kits installation."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from winsign.app.ports import SigningToolInfo, SigningToolLocatorPort
from winsign.utils.versions import is_sdk_version, sort_versions_descending

logger = logging.getLogger(__name__)

FALLBACK_SIGNTOOL_VERSION = "10.0.17763.0"
FALLBACK_SIGNING_TOOL = SigningToolInfo(
    path=f"C:/Program Files (x86)/Windows Kits/10/bin/{FALLBACK_SIGNTOOL_VERSION}/x86/signtool.exe",
    version=FALLBACK_SIGNTOOL_VERSION,
)


class WindowsKitsLocator(SigningToolLocatorPort):
    """Pick the newest SDK directory under ``base_dir`` that ships signtool.

    Layout searched: ``<base_dir>/<version>/<arch>/<tool_name>``. Any failure
    resolves to ``FALLBACK_SIGNING_TOOL`` and is logged, never raised.
    """

    def __init__(
        self,
        base_dir: Path,
        *,
        tool_name: str = "signtool.exe",
        arch: str = "x86",
        fallback: SigningToolInfo = FALLBACK_SIGNING_TOOL,
    ) -> None:
        self.base_dir = base_dir
        self.tool_name = tool_name
        self.arch = arch
        self.fallback = fallback

    def locate(self) -> SigningToolInfo:
        try:
            entries = os.listdir(self.base_dir)
        except OSError as exc:
            logger.warning(
                "Cannot list signtool versions in %s (%s); using fallback signtool %s",
                self.base_dir,
                exc,
                self.fallback.version,
            )
            return self.fallback

        versions = sort_versions_descending(name for name in entries if is_sdk_version(name))
        if not versions:
            logger.warning(
                "No SDK version directories found in %s; using fallback signtool %s",
                self.base_dir,
                self.fallback.version,
            )
            return self.fallback

        for version in versions:
            candidate = self.base_dir / version / self.arch / self.tool_name
            try:
                found = candidate.is_file()
            except OSError as exc:
                logger.debug("Cannot stat %s: %s", candidate, exc)
                found = False
            if found:
                logger.info("Using signtool %s at %s", version, candidate)
                return SigningToolInfo(path=str(candidate), version=version)
            logger.debug("signtool not present for SDK %s", version)

        logger.warning(
            "None of SDK versions %s in %s contain %s; using fallback signtool %s",
            ", ".join(versions),
            self.base_dir,
            self.tool_name,
            self.fallback.version,
        )
        return self.fallback
