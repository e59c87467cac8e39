"""Process-wide environment overrides applied before the runner starts."""

import logging
import os
from collections.abc import MutableMapping

from compiletest.models.config import Config
from compiletest.models.mode import Mode, is_android_target, requires_serial_execution

log = logging.getLogger(__name__)

TEST_THREADS_ENV = "COMPILETEST_THREADS"


def apply_mode_overrides(
    config: Config, environ: MutableMapping[str, str] | None = None
) -> None:
    """Set the environment the runner reads for this mode.

    Called once, before any test runs. The runner only reads these values
    afterwards.
    """
    if environ is None:
        environ = os.environ

    if is_android_target(config.target) and config.mode == Mode.DEBUGINFO_GDB:
        log.warning(
            "%s debug-info test uses tcp 5039 port. please reserve it",
            config.target,
        )

    if requires_serial_execution(config.mode, config.target):
        log.info("Forcing serial execution for %s on %s", config.mode, config.target)
        environ[TEST_THREADS_ENV] = "1"

    # Stops Windows UAC from blocking test binaries named like installers.
    environ["__COMPAT_LAYER"] = "RunAsInvoker"
