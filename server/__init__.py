"""HTTP request layer for the Klondike engine."""
