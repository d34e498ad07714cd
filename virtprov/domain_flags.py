"""Flag sets passed to libvirt when starting, destroying and undefining domains.

Values follow libvirt's ``virDomainUndefineFlagsValues``,
``virDomainCreateFlags`` and ``virDomainDestroyFlagsValues``.
"""

from __future__ import annotations

import enum
from typing import Mapping, Optional

LIBVIRT_VERSION_UNDEFINE_NVRAM_MIN = 1_002_009
LIBVIRT_VERSION_UNDEFINE_KEEP_NVRAM_MIN = 2_003_000
LIBVIRT_VERSION_UNDEFINE_TPM_MIN = 8_009_000
LIBVIRT_VERSION_UNDEFINE_KEEP_TPM_MIN = 8_009_000


class UndefineFlags(enum.IntFlag):
    """Flags accepted by libvirt when a domain is undefined."""

    MANAGED_SAVE = 1
    SNAPSHOTS_METADATA = 2
    NVRAM = 4
    KEEP_NVRAM = 8
    CHECKPOINTS_METADATA = 16
    TPM = 32
    KEEP_TPM = 64


class StartFlags(enum.IntFlag):
    """Flags accepted by libvirt when a defined domain is started."""

    PAUSED = 1
    AUTODESTROY = 2
    BYPASS_CACHE = 4
    FORCE_BOOT = 8
    VALIDATE = 16
    RESET_NVRAM = 32


class DestroyFlags(enum.IntFlag):
    """Flags accepted by libvirt when a running domain is destroyed."""

    DEFAULT = 0
    GRACEFUL = 1
    REMOVE_LOGS = 2


_START_OPTIONS = {
    "paused": StartFlags.PAUSED,
    "autodestroy": StartFlags.AUTODESTROY,
    "bypass_cache": StartFlags.BYPASS_CACHE,
    "force_boot": StartFlags.FORCE_BOOT,
    "validate": StartFlags.VALIDATE,
    "reset_nvram": StartFlags.RESET_NVRAM,
}

_DESTROY_OPTIONS = {
    "graceful": DestroyFlags.GRACEFUL,
}


def undefine_flags_for_update(libvirt_version: int) -> UndefineFlags:
    """Flags that keep NVRAM and TPM state while a domain is redefined."""
    flags = UndefineFlags(0)
    if libvirt_version >= LIBVIRT_VERSION_UNDEFINE_KEEP_NVRAM_MIN:
        flags |= UndefineFlags.KEEP_NVRAM
    if libvirt_version >= LIBVIRT_VERSION_UNDEFINE_KEEP_TPM_MIN:
        flags |= UndefineFlags.KEEP_TPM
    return flags


def undefine_flags_for_delete(libvirt_version: int) -> UndefineFlags:
    """Flags that remove NVRAM and TPM state along with a deleted domain."""
    flags = UndefineFlags(0)
    if libvirt_version >= LIBVIRT_VERSION_UNDEFINE_NVRAM_MIN:
        flags |= UndefineFlags.NVRAM
    if libvirt_version >= LIBVIRT_VERSION_UNDEFINE_TPM_MIN:
        flags |= UndefineFlags.TPM
    return flags


def _collect(options: Optional[Mapping[str, Optional[bool]]], table, empty):
    flags = empty
    if options is None:
        return flags
    for key, value in options.items():
        if key not in table:
            raise ValueError(f"unknown option {key!r}")
        if value is None:
            continue
        if not isinstance(value, bool):
            raise ValueError(f"option {key!r} expects a boolean, got {value!r}")
        if value:
            flags |= table[key]
    return flags


def start_flags_from_create(create: Optional[Mapping[str, Optional[bool]]]) -> StartFlags:
    """Start flags from a ``create`` block; ``None`` means no flags.

    Options that are ``None`` or ``False`` contribute nothing. Unknown options
    or non-boolean values raise ``ValueError``.
    """
    return _collect(create, _START_OPTIONS, StartFlags(0))


def destroy_flags_from_destroy(destroy: Optional[Mapping[str, Optional[bool]]]) -> DestroyFlags:
    """Destroy flags from a ``destroy`` block; ``None`` means the default."""
    return _collect(destroy, _DESTROY_OPTIONS, DestroyFlags.DEFAULT)