"""
Gateway test modules

Tests for the Swish gateway integration:
- Transport construction and certificate pinning
- Request encoding
- Response classification and header extraction
- Client operations against an in-process gateway
"""
