"""Adapters connecting logging, metrics and storage backends to obscheck."""
