from __future__ import annotations

import logging

from ..errors import PrivilegeError

logger = logging.getLogger(__name__)


def is_admin() -> bool:
    """Return True when running elevated on Windows."""

    import ctypes

    try:
        return ctypes.windll.shell32.IsUserAnAdmin() != 0
    except AttributeError:
        # Not Windows: ctypes has no windll.
        return False


def require_admin(*, dry_run: bool = False) -> None:
    if is_admin():
        return
    if dry_run:
        logger.warning("Not running as administrator; continuing because of dry run")
        return
    raise PrivilegeError("diskpart, bootsect, dism and the BCD provider require an elevated prompt")
