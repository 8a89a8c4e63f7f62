"""NDC - Scaffolds cloud-deployable .NET service projects from bundled templates.

A functional, Pydantic-based template tree renderer.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main CLI entry point
from .cli import main

__all__ = ["main"]
