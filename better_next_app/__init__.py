"""better-next-app -- scaffold Next.js projects from bundled templates."""

__version__ = "16.0.3"
