"""Role-gated ordering and inventory core for a multi-store retail platform."""

__version__ = "0.1.0"
