"""Domain model: content definitions, flags, gates and runtime state."""
