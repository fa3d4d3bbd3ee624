"""previewctl - Vercel preview deployment reconciler."""

__version__ = "0.1.0"
