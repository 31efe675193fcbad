from shopcart.models.cart import CartShare, SharePermission, ShopCart
from shopcart.models.shopper import Shopper

__all__ = [
    "CartShare",
    "SharePermission",
    "ShopCart",
    "Shopper",
]
