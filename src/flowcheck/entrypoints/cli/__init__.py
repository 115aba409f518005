"""The ``flowcheck`` command-line interface."""
