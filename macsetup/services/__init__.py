"""Wrappers around external tools consumed during provisioning."""
