"""Core Django app for dataVision: upload, charting and refinement views."""
