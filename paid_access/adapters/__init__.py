"""Adapters implementing the component ports."""
