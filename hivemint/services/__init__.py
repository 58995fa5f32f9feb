"""Services Layer — workflow orchestration over the boundary protocols.

Invariants:
    - Services depend only on core/ protocols, never on concrete clients
    - Each service is constructed per request with injected collaborators
"""
