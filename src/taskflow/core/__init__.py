"""Cross-cutting infrastructure: settings, logging, security and events."""
