"""API helpers: the orjson response class."""
