"""Go naming and OpenAPI reference helpers, lacunas, and txtar golden-file testing utilities."""

__version__ = "0.1.0"