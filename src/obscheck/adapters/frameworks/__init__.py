"""Framework integrations that record meters for tests to inspect."""
