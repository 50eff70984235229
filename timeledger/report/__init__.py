"""Reports: Rich terminal rendering and CSV export."""
