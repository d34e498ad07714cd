"""Separation of the provider-only ``wait_for_ip`` setting from domain devices.

Interfaces in a domain's ``devices`` block may carry a ``wait_for_ip`` entry
that libvirt knows nothing about. Before the devices are turned into domain
XML the entry is stripped and remembered. After the domain is read back it is
put back into each interface in the same position.

Devices are plain mappings. ``None`` stands for a null value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

DEFAULT_WAIT_TIMEOUT = 300
DEFAULT_WAIT_SOURCE = "any"

_WAIT_KEY = "wait_for_ip"
_INTERFACES_KEY = "interfaces"


class DomainPlanError(Exception):
    """Raised when the devices block of a domain plan has the wrong shape."""

    def __init__(self, summary: str, detail: str) -> None:
        super().__init__(f"{summary}: {detail}")
        self.summary = summary
        self.detail = detail


@dataclass(frozen=True)
class WaitForIPConfig:
    """How long and where to wait for an address on one interface."""

    index: int
    mac: str
    timeout: int
    source: str
    attribute: Mapping[str, Any]


@dataclass(frozen=True)
class StrippedDevices:
    """Devices without ``wait_for_ip``, plus what was removed.

    ``wait_values`` holds one entry per interface (``None`` where an
    interface had no ``wait_for_ip``), so it can be handed back to
    :func:`apply_wait_for_ip`.
    """

    devices: Optional[Dict[str, Any]]
    configs: Tuple[WaitForIPConfig, ...] = ()
    wait_values: Tuple[Optional[Mapping[str, Any]], ...] = field(default=())


def _interface_list(value: Any) -> Sequence[Any]:
    if not isinstance(value, (list, tuple)):
        raise DomainPlanError("Invalid interfaces value", "Expected interfaces to be a list.")
    return value


def _interface_mapping(value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DomainPlanError(
            "Invalid interface value", "Expected interface entry to be an object."
        )
    return value


def _wait_config(index: int, iface: Mapping[str, Any], wait: Any) -> WaitForIPConfig:
    if not isinstance(wait, Mapping):
        raise DomainPlanError(
            "Invalid wait_for_ip value", "Expected wait_for_ip to be an object."
        )
    unknown = set(wait) - {"timeout", "source"}
    if unknown:
        raise DomainPlanError(
            "Invalid wait_for_ip value",
            f"Unexpected attributes: {', '.join(sorted(unknown))}",
        )

    timeout = wait.get("timeout")
    if timeout is None:
        timeout = DEFAULT_WAIT_TIMEOUT
    elif isinstance(timeout, bool) or not isinstance(timeout, int):
        raise DomainPlanError(
            "Invalid wait_for_ip value", f"Expected timeout to be an integer, got {timeout!r}"
        )

    source = wait.get("source")
    if source is None:
        source = DEFAULT_WAIT_SOURCE
    elif not isinstance(source, str):
        raise DomainPlanError(
            "Invalid wait_for_ip value", f"Expected source to be a string, got {source!r}"
        )

    mac = ""
    mac_block = iface.get("mac")
    if mac_block is not None:
        if not isinstance(mac_block, Mapping):
            raise DomainPlanError("Invalid mac value", "Expected mac to be an object.")
        address = mac_block.get("address")
        if address is not None:
            mac = str(address)

    return WaitForIPConfig(
        index=index, mac=mac, timeout=timeout, source=source, attribute=wait
    )


def strip_wait_for_ip(devices: Optional[Mapping[str, Any]]) -> StrippedDevices:
    """Remove ``wait_for_ip`` from every interface in ``devices``.

    Returns the cleaned devices together with a :class:`WaitForIPConfig` for
    each interface that asked to wait, with ``timeout`` defaulting to 300
    seconds and ``source`` to ``any``.
    """
    if devices is None:
        return StrippedDevices(devices=None)

    clean: Dict[str, Any] = dict(devices)
    raw_interfaces = devices.get(_INTERFACES_KEY)
    if raw_interfaces is None:
        clean[_INTERFACES_KEY] = None
        return StrippedDevices(devices=clean)

    interfaces = _interface_list(raw_interfaces)
    clean_interfaces: List[Dict[str, Any]] = []
    wait_values: List[Optional[Mapping[str, Any]]] = []
    configs: List[WaitForIPConfig] = []

    for index, element in enumerate(interfaces):
        iface = _interface_mapping(element)
        wait = iface.get(_WAIT_KEY)
        wait_values.append(wait)
        if wait is not None:
            configs.append(_wait_config(index, iface, wait))
        clean_interfaces.append({k: v for k, v in iface.items() if k != _WAIT_KEY})

    clean[_INTERFACES_KEY] = clean_interfaces
    return StrippedDevices(
        devices=clean, configs=tuple(configs), wait_values=tuple(wait_values)
    )


def apply_wait_for_ip(
    devices: Optional[Mapping[str, Any]],
    wait_values: Sequence[Optional[Mapping[str, Any]]],
) -> Optional[Dict[str, Any]]:
    """Put ``wait_for_ip`` values back into the interfaces of ``devices``.

    The value at position ``i`` goes to interface ``i``; interfaces beyond
    the end of ``wait_values`` get ``None``.
    """
    if devices is None:
        return None

    result: Dict[str, Any] = dict(devices)
    raw_interfaces = devices.get(_INTERFACES_KEY)
    if raw_interfaces is None:
        result[_INTERFACES_KEY] = None
        return result

    interfaces = _interface_list(raw_interfaces)
    restored: List[Dict[str, Any]] = []
    for index, element in enumerate(interfaces):
        iface = _interface_mapping(element)
        new_iface = {k: v for k, v in iface.items() if k != _WAIT_KEY}
        new_iface[_WAIT_KEY] = wait_values[index] if index < len(wait_values) else None
        restored.append(new_iface)

    result[_INTERFACES_KEY] = restored
    return result