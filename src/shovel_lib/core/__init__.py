# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core infrastructure for shovel.

This module collects the configuration, error types, structured logging and
small filesystem helpers shared by the archiver and the command-line interface.
"""
