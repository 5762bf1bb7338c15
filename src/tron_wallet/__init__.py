"""Interactive command-line wallet for the TRON blockchain."""

__version__ = "0.1.0"
