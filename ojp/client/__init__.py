"""OAuth client metadata and CIMD encoding."""
