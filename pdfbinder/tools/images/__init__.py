"""Image conversion tool plugin."""
