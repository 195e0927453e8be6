"""Certificate store adapter using certutil.exe."""

from __future__ import annotations

import logging
from pathlib import Path

from winsign.app.ports import CertificateStorePort, CommandRunnerPort
from winsign.errors import CertificateStagingError, CommandError
from winsign.utils.crypto import decode_base64, write_secure_file
from winsign.utils.sanitize import format_command

logger = logging.getLogger(__name__)


class CertutilCertificateStore(CertificateStorePort):
    """Stage a PFX at a fixed path and import it with ``certutil -importpfx``."""

    def __init__(
        self,
        cert_path: Path,
        *,
        runner: CommandRunnerPort,
        certutil: str = "certutil",
    ) -> None:
        self.cert_path = cert_path
        self._runner = runner
        self._certutil = certutil

    def stage(self, encoded_certificate: str) -> Path:
        try:
            certificate = decode_base64(encoded_certificate)
        except ValueError as exc:
            raise CertificateStagingError(f"certificate input is not valid base64: {exc}") from exc

        logger.info("creating PFX Certificate at path: %s", self.cert_path)
        write_secure_file(self.cert_path, certificate)
        return self.cert_path

    def import_pfx(self, cert_path: Path, password: str) -> bool:
        args = [self._certutil, "-f", "-p", password, "-importpfx", str(cert_path)]
        logger.info('adding to store using "%s" command', format_command(args, [password]))

        try:
            result = self._runner.run(args, secrets=[password])
        except CommandError as exc:
            logger.error("certificate import failed: %s", exc)
            if exc.stdout:
                logger.error(exc.stdout)
            if exc.stderr:
                logger.error(exc.stderr)
            return False

        if result.stdout:
            logger.info(result.stdout)
        return True

    def cleanup(self) -> None:
        self.cert_path.unlink(missing_ok=True)
        logger.debug("removed staged certificate %s", self.cert_path)
