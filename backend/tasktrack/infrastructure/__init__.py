"""Infrastructure Layer — database, repositories and external collaborators.

Invariants:
    - Infrastructure never imports from services/
    - All external calls wrapped with timeout/error mapping
"""
