"""Upstream provider clients and the catalog pipeline."""
