"""Browser acceptance suite for the TodoMVC reference application."""

from __future__ import annotations

__version__ = "0.1.0"
