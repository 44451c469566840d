"""Shared building blocks for pdfbinder tools."""
