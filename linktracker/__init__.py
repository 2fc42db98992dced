"""Link Tracker - short link redirects with click analytics."""

__version__ = "0.1.0"
