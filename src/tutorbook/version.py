"""Single source of the tutorbook version string."""

__version__: str = "0.1.0"
