"""Domain core: document processing, grounding and shared exceptions."""
