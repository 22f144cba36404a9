"""autoedit: hook selection, edit decision lists and rendering for short-form video."""

__version__ = "0.1.0"
