"""Affiliate link monitor — validate and heal tracking links in built HTML."""
