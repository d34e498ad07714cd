"""Node device details, ignition files, domain flags and wait_for_ip plan handling for libvirt."""

__version__ = "0.1.0"