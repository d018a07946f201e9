"""Deal Hunter — search orchestration and settings persistence."""
