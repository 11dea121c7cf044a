"""
Cryptographic primitives: the Keccak-256 digest and secp256k1 signatures.
"""
