"""Bounded contexts of the gnuplatex build provider."""
