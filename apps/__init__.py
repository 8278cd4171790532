"""FileBridge apps. Each app keeps its @record classes in ``apps/<name>/records``."""
