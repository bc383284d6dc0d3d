"""
storefront — the commerce core behind a small web store.

    from storefront import pricing as P     # Tier prices, VAT display
    from storefront import status as S      # Order statuses, staff transitions
    from storefront import cart as C        # The shopper's cart session
    from storefront import normalize as N   # Backend payloads to canonical records
"""

from storefront import storage
from storefront import pricing
from storefront import normalize
from storefront import transport
from storefront import status
from storefront import cart
from storefront.config import StoreConfig
from storefront._notice import Notice, NoticeKind, NoticeSink
from storefront._optimistic import OptimisticUpdate, run_optimistic
from storefront._scope import ViewScope
from storefront._types import (
    Lazy,
    Payload,
)

__version__ = "0.1.0"

__all__ = (
    "storage",
    "pricing",
    "normalize",
    "transport",
    "status",
    "cart",
    "StoreConfig",
    "Notice",
    "NoticeKind",
    "NoticeSink",
    "OptimisticUpdate",
    "run_optimistic",
    "ViewScope",
    "Lazy",
    "Payload",
)
