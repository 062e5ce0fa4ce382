"""BDD test file for observation assertion features.

This file loads scenarios from feature files and generates test functions.
Step definitions are in conftest.py.
"""

from pytest_bdd import scenarios

scenarios("observation_assertions.feature")
