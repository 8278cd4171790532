"""FileBridge database layer — engine registry, sessions, content tables."""
