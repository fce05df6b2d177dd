"""HTTP API for previewing mappings."""
