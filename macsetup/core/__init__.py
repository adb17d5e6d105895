"""Provisioning engine: host access, startup file, sequence loading."""
