# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import redis


class CartCodeCollision(Exception):
    """Insert hit the unique constraint on saved_carts.cart_code."""

    def __init__(self, cart_code: str):
        super().__init__(f"Cart code {cart_code} already taken")
        self.cart_code = cart_code


class OrderNumberCollision(Exception):
    """Insert hit the unique constraint on orders.order_number."""

    def __init__(self, order_number: str):
        super().__init__(f"Order number {order_number} already taken")
        self.order_number = order_number


def collision_retry(attempts: int, collision: type[Exception]):
    # no wait, every attempt draws a fresh code
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        retry=retry_if_exception_type(collision),
    )


def cart_code_retry(attempts: int):
    return collision_retry(attempts, CartCodeCollision)


def order_number_retry(attempts: int):
    return collision_retry(attempts, OrderNumberCollision)


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )
