"""I/O models for API requests and responses, one module per resource."""
