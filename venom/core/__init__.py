"""Application logic layer: cache, forms, commands and the session controller."""
