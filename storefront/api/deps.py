# storefront/api/deps.py
import uuid
from functools import lru_cache

from fastapi import Cookie, Response

from storefront.services.cart_storage import CartStorage, RedisCartStorage
from storefront.utils.settings import GUEST_CART_TTL_SECONDS

CART_SESSION_COOKIE = "cartSession"


@lru_cache
def get_cart_storage() -> CartStorage:
    return RedisCartStorage()


def get_cart_session(
    response: Response,
    cart_session: str | None = Cookie(None, alias=CART_SESSION_COOKIE),
) -> str:
    #first visit: issue the guest cart key
    if not cart_session:
        cart_session = uuid.uuid4().hex
        response.set_cookie(
            CART_SESSION_COOKIE,
            cart_session,
            max_age=GUEST_CART_TTL_SECONDS,
            httponly=True,
            samesite="lax",
        )
    return cart_session
