"""Categories - tenant category metadata and seeded defaults."""
