"""JobFlow: AI-assisted job search, discovery and AutoPilot application queue."""

__version__ = "0.3.0"
