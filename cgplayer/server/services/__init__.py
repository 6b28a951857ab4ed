"""Request dependencies and the services the routers build on."""
