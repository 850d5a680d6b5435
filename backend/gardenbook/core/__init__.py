"""Catalog core: specimen lifecycle and category guard, independent of the web shell."""
