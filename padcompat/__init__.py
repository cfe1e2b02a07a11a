"""PadCompat - gamepad compatibility detection for game libraries."""

__version__ = "0.1.0"
