"""hostpick - Search and pick hosts from your SSH config."""

__version__ = "0.1.0"
