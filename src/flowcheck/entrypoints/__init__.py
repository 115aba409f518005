"""Entry points into FLOWCHECK (currently the command line)."""
