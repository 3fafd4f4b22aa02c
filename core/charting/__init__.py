"""Django-side wiring for the chart plugin engine.

This package holds the built-in plugin catalog, the YAML catalog loader, and
the process-wide engine bootstrap used by views and management commands.
"""
