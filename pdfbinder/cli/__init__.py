"""Command line interface for :mod:`pdfbinder`."""
