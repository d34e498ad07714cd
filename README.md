# virtprov

Helpers for managing libvirt hosts and virtual machines: host device details,
Ignition files on local disk, the flag sets libvirt expects when starting,
destroying and undefining domains, and handling of the `wait_for_ip` setting on
domain network interfaces.

virtprov opens no connections of its own. Where it needs libvirt, you pass in a
client object that makes the remote call. Failures are raised as exceptions.

## Installation

```
pip install virtprov
```

To install the test dependencies as well:

```
pip install "virtprov[test]"
```

## Modules

### `virtprov.node_device_info`

- `read_node_device_info(client, name)` calls
  `client.node_device_get_xml_desc(name)`, parses the `<device>` XML it
  returns, and gives back a frozen `NodeDevice`. The object has the fields
  `id`, `name`, `path`, `parent` and `capability`. Both `id` and `name` are set
  to the requested name.
- `parse_node_device_xml(xml_text)` parses a `<device>` document without a
  client.
- `capability_attributes(capability)` turns a `<capability>` element into a flat
  dict. The dict always holds every known key: `type`, the PCI fields (`domain`,
  `bus`, `slot`, `function`, `class`, `iommu_group`), product and vendor ids and
  names, `device_number` for USB devices, the network fields (`interface`,
  `address`, `link_speed`, `link_state`), the storage fields (`block`,
  `drive_type`, `model`, `serial`, `size`, `logical_block_size`,
  `num_blocks`), and the SCSI fields (`host`, `target`, `lun`, `scsi_type`).
  Keys that do not apply to the device type are `None`.
  - `type` is one of `pci`, `usb_device`, `net`, `storage`, `scsi`, `system`,
    `usb`, `scsi_host` or `drm`, and is `unknown` for anything else.
  - A storage device that names its bus (such as `ata`) is rejected, because
    `bus` only holds numbers.

Retrieval, parse and conversion failures raise `NodeDeviceError`, which
carries `summary` and `detail` attributes.

### `virtprov.ignition`

- `create_ignition(name, content, directory=None)` writes `content` to
  `ignition-<id>.ign`, where `<id>` is the first 16 hex digits of the content's
  SHA-256. It returns an `IgnitionFile` with the fields `id`, `name`,
  `content`, `path` and `size`. If a file with that name already exists, it is
  reused unchanged. The default directory is `ignition_directory()`, which is
  `virtprov-ignition` under the system temporary directory.
- `refresh_ignition(ignition)` returns the record with its current file size.
  If the file is gone, it returns `None`.
- `update_ignition(ignition)` always raises. An ignition file can only be
  replaced, never updated.
- `delete_ignition(ignition)` removes the file. A file that is already missing
  is not an error.

Other failures raise `IgnitionError`.

### `virtprov.domain_flags`

- `UndefineFlags`, `StartFlags` and `DestroyFlags` are `IntFlag` enums with
  libvirt's numeric values.
- `undefine_flags_for_update(libvirt_version)` returns `KEEP_NVRAM` from
  version 2003000 and `KEEP_TPM` from 8009000.
- `undefine_flags_for_delete(libvirt_version)` returns `NVRAM` from version
  1002009 and `TPM` from 8009000.
- `start_flags_from_create(create)` builds flags from a mapping. The accepted
  keys are `paused`, `autodestroy`, `bypass_cache`, `force_boot`, `validate`
  and `reset_nvram`.
- `destroy_flags_from_destroy(destroy)` builds flags from a mapping. The only
  accepted key is `graceful`.

For both builders, passing `None` gives no flags, and values of `None` or
`False` add nothing. Unknown keys and non-boolean values raise `ValueError`.

### `virtprov.domain_plan`

- `strip_wait_for_ip(devices)` removes `wait_for_ip` from each interface in
  `devices["interfaces"]`. It returns a `StrippedDevices` with these parts:
  - `devices`: the cleaned devices.
  - `configs`: one `WaitForIPConfig` per interface that asked to wait. Each has
    `index`, `mac`, `timeout` (default 300) and `source` (default `any`).
  - `wait_values`: one entry per interface, which is `None` where the interface
    had no setting.
- `apply_wait_for_ip(devices, wait_values)` puts the settings back in order.

A badly shaped devices block raises `DomainPlanError`.

### `virtprov.machine_type`

- `is_expanded_machine_type(plan, state)` tells whether a stored machine type
  is libvirt's expansion of a requested one, for example `q35` and
  `pc-q35-10.1`.
- `modify_machine_type_plan(plan, state)` returns the stored value when it is
  such an expansion. Otherwise it returns the planned value.

## Example

```python
from virtprov.domain_flags import start_flags_from_create, undefine_flags_for_delete
from virtprov.domain_plan import strip_wait_for_ip
from virtprov.machine_type import is_expanded_machine_type

is_expanded_machine_type("q35", "pc-q35-10.1")           # True
int(start_flags_from_create({"paused": True, "validate": True}))  # 17
int(undefine_flags_for_delete(8_009_000))                  # 36 (NVRAM | TPM)

stripped = strip_wait_for_ip({
    "interfaces": [
        {"mac": {"address": "02:00:00:00:00:01"}, "wait_for_ip": {"timeout": 60}},
    ],
})
config = stripped.configs[0]
config.mac, config.timeout, config.source  # ("02:00:00:00:00:01", 60, "any")
```

## What it does not do

virtprov does not connect to libvirt and does not manage domains on its own.
It has no command-line tool. It does not define, start, stop or undefine
domains, and it does not poll for interface addresses. It cannot read the
host's CPU and memory summary or list the host's devices. Its functions supply
the flags, device details and plan data that such operations use, and the
calling code makes the libvirt calls itself.