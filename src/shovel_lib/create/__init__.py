# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""Command-line interface for packing a directory into a timestamped archive."""
