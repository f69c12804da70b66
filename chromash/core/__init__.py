"""Color extraction and theme derivation."""
