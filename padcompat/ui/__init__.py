"""User interface module for PadCompat."""
