"""Client for the Coze HTTP API: workflow runs and streams, run histories, templates and users."""

__version__ = "0.1.0"