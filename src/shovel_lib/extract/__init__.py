# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""Command-line interface for extracting an archive into a timestamped deploy directory."""
