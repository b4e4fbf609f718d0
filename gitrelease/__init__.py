"""Git-backed release workflow: preflight, tag, checksum and publish."""

__version__ = "0.1.0"
