"""Live preview of node edit forms, and a block that embeds a node preview."""

__version__ = "0.1.0"
