"""Domain primitives: exceptions and file type detection."""
