"""Checkout-core components."""
