"""hivemint — beehive investment NFTs on Hedera with IPFS metadata.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
