"""Inspection tool plugin."""
