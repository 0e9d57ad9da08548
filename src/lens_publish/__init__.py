"""lens-publish: publication submission orchestrator for the Lens protocol."""

__version__ = "0.1.0"
