"""Service layer for invoicing and guarded reservation changes."""
