"""Domain enumerations and API I/O schemas."""
