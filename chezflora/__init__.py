"""ChezFlora.

Backend service for the ChezFlora flower-shop storefront. The single-page
front end talks to this service over a REST API mounted under ``/api/v1``.

High-level architecture
-----------------------

- ``chezflora.core``:

  - Logging and monitoring configuration.
  - The domain error hierarchy shared by every service.
  - Password hashing and access-token helpers.
  - The SQLModel entities, repositories and async session management.
  - Pydantic I/O schemas used by the HTTP layer.

- ``chezflora.server``:

  - The FastAPI application, settings and middleware.
  - Business services (catalog, cart, checkout, quotes, blog, ...).
  - Versioned API routers.

Typical shopper workflow
------------------------

1. Browse the catalog (categories, products, tags) anonymously.
2. Fill a guest cart identified by the ``X-Guest-Cart`` token.
3. Register or log in; the guest cart is merged into the account cart.
4. Register shipping and billing addresses.
5. Check out; stock is reserved and the cart is emptied.
"""

__version__ = "1.0.0"
