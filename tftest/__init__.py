"""Testing framework and command-line tool for Terraform modules."""

__version__ = "0.1.0"