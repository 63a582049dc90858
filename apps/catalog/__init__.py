"""
Catalog App - Reward Categories and Products

Categories group the rewards players can buy. Products carry a price in
reward points, an optional image and a snapshot of their category's name.

Key rules:
- A category referenced by any product cannot be deleted
- Product category names are snapshots, not live references
- Product images live in the storage backend, not in the database
"""
