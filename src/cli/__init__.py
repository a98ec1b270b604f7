"""Command-line interface: barfeat export."""
