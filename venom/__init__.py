"""Venom: manage per-project environment variables from the terminal."""
