"""
Top-level package for the beverage catalog search and cart backend.

This package contains modules for normalizing the raw beverage catalog
into a searchable in-memory index, ranking catalog items against free
text queries ("skol lata 473ml cx"), keeping short-lived shopping carts
in memory and serving all of it through a small HTTP API.  There are no
side-effects on import: the catalog is only read when the API starts or
when a caller asks for it explicitly.
"""
