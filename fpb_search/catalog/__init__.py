"""
Catalog package: data model, loading, flattening and the HTTP routes.

The free-programming-books catalog is a tree of markdown documents,
one per human language (plus the English subject pages), each split
into sections and subsections of book entries. This package turns
that tree into a flat, searchable list and exposes search over it
under ``/api/catalog``. The router lives in ``catalog.router`` and is
mounted by ``fpb_search.main``.
"""
