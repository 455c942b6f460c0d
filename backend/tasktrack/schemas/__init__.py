"""Request bodies. Converted to core dataclasses before reaching a service."""
