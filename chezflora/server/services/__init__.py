"""
Business services.

Each service wraps an ``AsyncSession`` and owns the transaction of the
operations it exposes. Services raise ``chezflora.core.errors`` exceptions;
the API layer turns them into HTTP responses.
"""
