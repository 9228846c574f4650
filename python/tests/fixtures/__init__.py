"""
Pytest fixtures for errtree tests.

Fixtures are organized by test category:
- trees.py: Sample error trees and their expected renderings
"""
