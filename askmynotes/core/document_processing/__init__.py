"""Text extraction, chunking and the post-upload processing pipeline."""
