"""Operating-system backed implementations of core protocols."""
