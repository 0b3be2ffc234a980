"""
Backend selection module for prismprobe.

Selects the property store that talks to the host audio subsystem of the
current operating system.
"""

from __future__ import annotations

import logging
import platform

from .base import HostQueryError, PropertyStore, owned_ref

logger = logging.getLogger(__name__)


def get_backend() -> PropertyStore:
    """
    Get the property store for the current platform.

    Returns:
        Platform-specific PropertyStore implementation

    Raises:
        NotImplementedError: If the current platform is not supported
        RuntimeError: If the backend for the current platform cannot be loaded
    """
    system = platform.system()

    if system == "Darwin":  # macOS
        from .macos_pyobjc import CoreAudioPropertyStore, is_available
        if not is_available():
            raise RuntimeError(
                "No macOS backend available.\n"
                "Install PyObjC:\n"
                "  pip install pyobjc-core pyobjc-framework-CoreAudio"
            )
        logger.debug("Using PyObjC Core Audio backend")
        return CoreAudioPropertyStore()

    raise NotImplementedError(
        f"Platform '{system}' is not supported. "
        "Prism devices are Core Audio server plug-ins and exist only on macOS"
    )


__all__ = ["get_backend", "HostQueryError", "PropertyStore", "owned_ref"]
