"""
Shared services used by the boundaries.

- http.py    - retrying ``requests`` session for remote datasets
- queries.py - the windowed query operations over the active snapshot
"""
