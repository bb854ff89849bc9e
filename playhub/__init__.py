"""
PlayHub application package.

Layered the same way throughout:

  playhub/repositories/  in-memory entity collections with id sequences.
  playhub/services/      business logic: validation, derived fields, queries.

:class:`~playhub.store.CatalogStore` is the integration point: it owns one
instance of every repository plus the lock that serializes mutations.  Services
receive the store in ``__init__`` so tests can build an isolated store per
case.  Route handlers in ``playhub_web.py`` only talk to services.
"""

__version__ = '1.0.0'
