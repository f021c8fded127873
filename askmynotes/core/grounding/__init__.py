"""Context assembly and grounded generation (answers and study sets)."""
