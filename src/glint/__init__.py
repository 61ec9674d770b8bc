"""glint: pick the files to commit from an interactive checklist."""

__version__ = "0.1.0"
