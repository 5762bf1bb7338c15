"""Interactive menu shell for the TRON wallet."""
