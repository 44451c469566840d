"""Sub-command definitions for the ``pdfbinder`` CLI."""
