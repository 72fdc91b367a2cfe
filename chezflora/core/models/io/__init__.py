"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- users: Registration, login, profile and admin account models
- catalog: Category, product, tag and favorite models
- carts: Cart and cart line models
- addresses: Address models
- orders: Checkout, order and status history models
- quotes: Quote request and priced quote models
- blog: Post, comment and reaction models
- newsletter: Subscription models
- health: Health and version models
"""

from .addresses import AddressCreate, AddressRead, AddressUpdate
from .blog import (
    CommentCreate,
    CommentRead,
    PostCreate,
    PostRead,
    PostSchedule,
    PostUpdate,
    PublishResult,
    ReactionCounts,
    ReactionRequest,
)
from .carts import CartItemAdd, CartItemRead, CartItemUpdate, CartMerge, CartRead
from .catalog import (
    CategoryCreate,
    CategoryNode,
    CategoryRead,
    CategoryReorder,
    CategoryUpdate,
    FavoriteRead,
    ProductCreate,
    ProductDetail,
    ProductRead,
    ProductTagsUpdate,
    ProductUpdate,
    StockUpdate,
    TagCreate,
    TagRead,
    TagUpdate,
)
from .health import HealthResponse, ReadinessResponse, VersionResponse
from .newsletter import SubscribeResponse, SubscriptionRead, SubscriptionRequest, SubscriptionStatus
from .orders import CheckoutRequest, OrderCancel, OrderItemRead, OrderRead, OrderStatusUpdate, StatusHistoryRead
from .quotes import (
    QuoteCreate,
    QuoteDecision,
    QuoteItemIn,
    QuoteItemRead,
    QuoteRead,
    QuoteSend,
    QuoteStatusUpdate,
    QuoteUpdate,
)
from .users import (
    AuditLogRead,
    LoginRequest,
    PasswordChange,
    PasswordReset,
    ProfileUpdate,
    RegisterRequest,
    RoleChange,
    StatusChange,
    TokenResponse,
    UserCreate,
    UserRead,
    UserUpdate,
)

__all__ = [
    "AddressCreate",
    "AddressRead",
    "AddressUpdate",
    "AuditLogRead",
    "CartItemAdd",
    "CartItemRead",
    "CartItemUpdate",
    "CartMerge",
    "CartRead",
    "CategoryCreate",
    "CategoryNode",
    "CategoryRead",
    "CategoryReorder",
    "CategoryUpdate",
    "CheckoutRequest",
    "CommentCreate",
    "CommentRead",
    "FavoriteRead",
    "HealthResponse",
    "ReadinessResponse",
    "LoginRequest",
    "OrderCancel",
    "OrderItemRead",
    "OrderRead",
    "OrderStatusUpdate",
    "PasswordChange",
    "PasswordReset",
    "PostCreate",
    "PostRead",
    "PostSchedule",
    "PostUpdate",
    "ProductCreate",
    "ProductDetail",
    "ProductRead",
    "ProductTagsUpdate",
    "ProductUpdate",
    "ProfileUpdate",
    "PublishResult",
    "QuoteCreate",
    "QuoteDecision",
    "QuoteItemIn",
    "QuoteItemRead",
    "QuoteRead",
    "QuoteSend",
    "QuoteStatusUpdate",
    "QuoteUpdate",
    "ReactionCounts",
    "ReactionRequest",
    "RegisterRequest",
    "RoleChange",
    "StatusChange",
    "StatusHistoryRead",
    "StockUpdate",
    "SubscribeResponse",
    "SubscriptionRead",
    "SubscriptionRequest",
    "SubscriptionStatus",
    "TagCreate",
    "TagRead",
    "TagUpdate",
    "TokenResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "VersionResponse",
]
