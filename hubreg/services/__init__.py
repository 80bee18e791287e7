"""Services layered on top of the registry client."""
