"""Loading of defaults and per-image config files."""
