"""
Test suite for EQUIMAP

Unit tests for record models, graph building and validation, layout,
interaction, the map session, settings and the CLI.
"""
