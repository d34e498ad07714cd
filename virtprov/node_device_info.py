"""Detailed information about a single libvirt host node device."""

from __future__ import annotations

import dataclasses
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Protocol, Union

AttributeValue = Union[str, int, None]

# Every capability attribute and the kind of value it holds.
_ATTRIBUTE_TYPES: Dict[str, type] = {
    "type": str,
    "domain": int,
    "bus": int,
    "slot": int,
    "function": int,
    "class": str,
    "product_id": str,
    "product_name": str,
    "vendor_id": str,
    "vendor_name": str,
    "iommu_group": int,
    "device_number": int,
    "interface": str,
    "address": str,
    "link_speed": str,
    "link_state": str,
    "block": str,
    "drive_type": str,
    "model": str,
    "serial": str,
    "size": int,
    "logical_block_size": int,
    "num_blocks": int,
    "host": int,
    "target": int,
    "lun": int,
    "scsi_type": str,
}

_TYPE_NAMES = {str: "string", int: "number"}


class NodeDeviceError(Exception):
    """Raised when a node device cannot be retrieved, parsed or converted."""

    def __init__(self, summary: str, detail: str) -> None:
        super().__init__(f"{summary}: {detail}")
        self.summary = summary
        self.detail = detail


class NodeDeviceClient(Protocol):
    def node_device_get_xml_desc(self, name: str) -> str:
        """Return the XML description of the named node device."""


@dataclass(frozen=True)
class NodeDevice:
    """A host device with its place in the hierarchy and capability details."""

    id: str
    name: str
    path: str
    parent: str
    capability: Dict[str, AttributeValue] = field(default_factory=dict)


def _uint(text: str) -> int:
    stripped = text.strip()
    if not (stripped.isascii() and stripped.isdigit()):
        raise ValueError(f"invalid unsigned integer {text!r}")
    return int(stripped)


def _int(text: str) -> int:
    stripped = text.strip()
    digits = stripped[1:] if stripped[:1] in ("-", "+") else stripped
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"invalid integer {text!r}")
    return int(stripped)


def _text(parent: ET.Element, tag: str) -> str:
    element = parent.find(tag)
    if element is None:
        return ""
    return element.text or ""


def _optional_uint(parent: ET.Element, tag: str) -> Optional[int]:
    element = parent.find(tag)
    if element is None:
        return None
    return _uint(element.text or "")


def _required_uint(parent: ET.Element, tag: str) -> int:
    value = _optional_uint(parent, tag)
    return 0 if value is None else value


def _non_empty(attrs: Dict[str, AttributeValue], key: str, value: str) -> None:
    if value:
        attrs[key] = value


def _id_and_name(attrs: Dict[str, AttributeValue], cap: ET.Element, tag: str, prefix: str) -> None:
    element = cap.find(tag)
    if element is None:
        return
    _non_empty(attrs, f"{prefix}_id", element.get("id", ""))
    _non_empty(attrs, f"{prefix}_name", element.text or "")


def _fill_pci(attrs: Dict[str, AttributeValue], cap: ET.Element) -> None:
    attrs["type"] = "pci"
    for key in ("domain", "bus", "slot", "function"):
        value = _optional_uint(cap, key)
        if value is not None:
            attrs[key] = value
    _non_empty(attrs, "class", _text(cap, "class"))
    _id_and_name(attrs, cap, "product", "product")
    _id_and_name(attrs, cap, "vendor", "vendor")
    group = cap.find("iommuGroup")
    if group is not None:
        number = group.get("number")
        attrs["iommu_group"] = 0 if number is None else _int(number)


def _fill_usb_device(attrs: Dict[str, AttributeValue], cap: ET.Element) -> None:
    attrs["type"] = "usb_device"
    attrs["bus"] = _required_uint(cap, "bus")
    attrs["device_number"] = _required_uint(cap, "device")
    _id_and_name(attrs, cap, "product", "product")
    _id_and_name(attrs, cap, "vendor", "vendor")


def _fill_net(attrs: Dict[str, AttributeValue], cap: ET.Element) -> None:
    attrs["type"] = "net"
    _non_empty(attrs, "interface", _text(cap, "interface"))
    _non_empty(attrs, "address", _text(cap, "address"))
    link = cap.find("link")
    if link is not None:
        _non_empty(attrs, "link_speed", link.get("speed", ""))
        _non_empty(attrs, "link_state", link.get("state", ""))


def _fill_storage(attrs: Dict[str, AttributeValue], cap: ET.Element) -> None:
    attrs["type"] = "storage"
    _non_empty(attrs, "block", _text(cap, "block"))
    # The storage bus is a name such as "ata", which the numeric bus
    # attribute cannot hold; conversion rejects it below.
    _non_empty(attrs, "bus", _text(cap, "bus"))
    _non_empty(attrs, "drive_type", _text(cap, "drive_type"))
    _non_empty(attrs, "model", _text(cap, "model"))
    _non_empty(attrs, "vendor_name", _text(cap, "vendor"))
    _non_empty(attrs, "serial", _text(cap, "serial"))
    for key in ("size", "logical_block_size", "num_blocks"):
        value = _optional_uint(cap, key)
        if value is not None:
            attrs[key] = value


def _fill_scsi(attrs: Dict[str, AttributeValue], cap: ET.Element) -> None:
    attrs["type"] = "scsi"
    for key in ("host", "bus", "target", "lun"):
        attrs[key] = _required_uint(cap, key)
    _non_empty(attrs, "scsi_type", _text(cap, "type"))


def _fill_scsi_host(attrs: Dict[str, AttributeValue], cap: ET.Element) -> None:
    attrs["type"] = "scsi_host"
    attrs["host"] = _required_uint(cap, "host")


def _type_only(name: str) -> Callable[[Dict[str, AttributeValue], ET.Element], None]:
    def fill(attrs: Dict[str, AttributeValue], cap: ET.Element) -> None:
        attrs["type"] = name

    return fill


_HANDLERS: Dict[str, Callable[[Dict[str, AttributeValue], ET.Element], None]] = {
    "pci": _fill_pci,
    "usb_device": _fill_usb_device,
    "net": _fill_net,
    "storage": _fill_storage,
    "scsi": _fill_scsi,
    "system": _type_only("system"),
    "usb": _type_only("usb"),
    "scsi_host": _fill_scsi_host,
    "drm": _type_only("drm"),
}


def capability_attributes(capability: Optional[ET.Element]) -> Dict[str, AttributeValue]:
    """Convert a ``<capability>`` element into a flat attribute mapping.

    Every known attribute is present; those that do not apply to the device
    type are ``None``. Malformed numbers raise ``ValueError``; a value of the
    wrong kind for its attribute raises :class:`NodeDeviceError`.
    """
    attrs: Dict[str, AttributeValue] = dict.fromkeys(_ATTRIBUTE_TYPES)
    cap_type = None if capability is None else capability.get("type")
    handler = _HANDLERS.get(cap_type or "")
    if handler is None or capability is None:
        attrs["type"] = "unknown"
    else:
        handler(attrs, capability)

    for key, value in attrs.items():
        expected = _ATTRIBUTE_TYPES[key]
        if value is not None and not isinstance(value, expected):
            raise NodeDeviceError(
                "Value Conversion Error",
                f"attribute {key!r} expects a {_TYPE_NAMES[expected]} value, "
                f"got {value!r}",
            )
    return attrs


def _parse(xml_text: str) -> NodeDevice:
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise ValueError(str(exc)) from exc
    if root.tag != "device":
        raise ValueError(f"expected element type <device> but have <{root.tag}>")
    name = _text(root, "name")
    return NodeDevice(
        id=name,
        name=name,
        path=_text(root, "path"),
        parent=_text(root, "parent"),
        capability=capability_attributes(root.find("capability")),
    )


def parse_node_device_xml(xml_text: str) -> NodeDevice:
    """Parse a libvirt ``<device>`` XML description."""
    try:
        return _parse(xml_text)
    except ValueError as exc:
        raise NodeDeviceError(
            "Failed to parse device XML", f"Unable to parse device XML: {exc}"
        ) from exc


def read_node_device_info(client: NodeDeviceClient, name: str) -> NodeDevice:
    """Fetch and describe the host device called ``name``."""
    try:
        xml_text = client.node_device_get_xml_desc(name)
    except Exception as exc:
        raise NodeDeviceError(
            "Failed to get device information",
            f"Unable to retrieve device {name}: {exc}",
        ) from exc

    try:
        device = _parse(xml_text)
    except ValueError as exc:
        raise NodeDeviceError(
            "Failed to parse device XML",
            f"Unable to parse device XML for {name}: {exc}",
        ) from exc

    return dataclasses.replace(device, id=name, name=name)