"""Adapters implementing the interfaces in `flowcheck.interfaces`."""
