"""Tools for handling cross-frequency coupling analysis."""

from .pac import PAC
