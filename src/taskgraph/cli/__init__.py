"""TaskGraph command line interface."""
