"""macsetup - idempotent macOS developer workstation provisioning."""

__version__ = "0.1.0"
