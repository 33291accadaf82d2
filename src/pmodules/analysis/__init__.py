"""Path analysis and loading."""
