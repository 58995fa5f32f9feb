"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every external failure mapped to a HiveMintError subclass, no retries
"""
