"""MetalFrame Studio posts site: API server and posts sync client."""

__version__ = "1.0.0"
