"""Data module - tenant-scoped transaction and category storage."""
