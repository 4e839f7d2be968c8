"""Package metadata for postal."""

__app_name__ = "postal"
__version__ = "0.1.0"
__author__ = "postal contributors"
