"""Textual front-end helpers for rumu."""
