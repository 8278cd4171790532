"""FileBridge engine — config, errors, logging, context, registry, runtime."""
