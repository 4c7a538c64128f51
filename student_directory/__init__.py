"""
Top-level package for the Student Directory client.

The package is split into ``app`` (configuration, schemas, the HTTP
service facade and the view coordinators) and ``console``, the
interactive front-end that drives the coordinators.  Nothing is
exported from here; import from the submodules directly.
"""

__all__ = []
