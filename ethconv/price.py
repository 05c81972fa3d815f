"""
Ether to USD exchange rate cache with periodic background refresh.

The rate is best effort: it starts at zero, is replaced on every successful
fetch and keeps its previous value when a fetch fails. Inspections read the
cached value and never wait for the network.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import http.client
import json
import logging
import math
import threading
from decimal import Decimal, InvalidOperation
from typing import Callable
from urllib.request import urlopen

logger = logging.getLogger(__name__)

# @formatter:off

# Constants ------------------------------------------------------------------------------------------------------------

DEFAULT_PRICE_URL = "https://api.coingecko.com/api/v3/simple/price?ids=ethereum&vs_currencies=usd"
DEFAULT_REFRESH_INTERVAL_SEC = 300.0    # 5 minutes, within public API rate limits
DEFAULT_FETCH_TIMEOUT_SEC = 10.0

# @formatter:on

# Classes --------------------------------------------------------------------------------------------------------------

class PriceCache:
    """
    Single-value holder of the USD per ether rate.

    Written only by a PriceRefresher, read by every inspection. The value is
    replaced as a whole, so readers see either the old or the new rate.
    """

    def __init__(self, initial: Decimal | float | int | str = 0):
        self._value = _as_decimal(initial)

    def get(self) -> Decimal:
        return self._value

    def set(self, price: Decimal | float | int | str) -> None:
        self._value = _as_decimal(price)

    def __repr__(self) -> str:
        return f"PriceCache({str(self._value)!r})"


class PriceRefresher:
    """
    Background thread refreshing a PriceCache at a fixed interval.

    The first fetch runs as soon as the thread starts. Failed fetches are logged
    and leave the cached rate untouched.

    Examples:
        >>> cache = PriceCache()
        >>> with PriceRefresher(cache, interval_sec=60):
        ...     inspector = Inspector(rate=cache.get)
    """

    def __init__(
            self,
            cache: PriceCache,
            fetch: Callable[[], float] | None = None,
            interval_sec: float = DEFAULT_REFRESH_INTERVAL_SEC,
    ):
        _validate_positive(interval_sec, "interval_sec")
        self.cache = cache
        self.fetch = fetch or fetch_eth_price
        self.interval_sec = interval_sec
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh(self) -> bool:
        """
        Fetch the rate once and store it.

        Returns:
            True if the cache was updated, False if the fetch failed.
        """
        try:
            price = self.fetch()
            self.cache.set(price)
        except (OSError, http.client.HTTPException, ValueError, KeyError, TypeError) as e:
            logger.warning("ETH price refresh failed, keeping %s USD: %s", self.cache.get(), e)
            return False
        logger.debug("ETH price refreshed: %s USD", self.cache.get())
        return True

    def start(self) -> None:
        """Start the refresh thread. Does nothing if it is already running."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="ethconv-price", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Signal the refresh thread to exit and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        self.refresh()
        while not self._stop.wait(self.interval_sec):
            self.refresh()

    def __enter__(self) -> "PriceRefresher":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False


# Methods --------------------------------------------------------------------------------------------------------------

def fetch_eth_price(
        url: str = DEFAULT_PRICE_URL,
        timeout_sec: float = DEFAULT_FETCH_TIMEOUT_SEC,
) -> float:
    """
    Fetch the current ether price in USD from the CoinGecko simple price API.

    Args:
        url: Endpoint returning ``{"ethereum": {"usd": <price>}}``.
        timeout_sec: Socket timeout of the request.

    Returns:
        Price of one ether in USD.

    Raises:
        URLError: If the endpoint cannot be reached.
        HTTPError: If the server returns an error status.
        HTTPException: If the response is cut short or malformed, e.g. IncompleteRead.
        TimeoutError: If the request times out.
        ValueError: If the payload is not JSON or the price is negative or not finite.
        KeyError: If the payload has no ethereum.usd entry.
    """
    _validate_positive(timeout_sec, "timeout_sec")

    with urlopen(url, timeout=timeout_sec) as response:
        payload = json.loads(response.read().decode("utf-8"))

    price = float(payload["ethereum"]["usd"])
    if not math.isfinite(price) or price < 0:
        raise ValueError(f"invalid ETH price in response: {price}")
    return price


# Private helper methods -----------------------------------------------------------------------------------------------

def _as_decimal(value: Decimal | float | int | str) -> Decimal:
    """Convert a rate to Decimal, floats through their shortest repr."""
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"rate must be a number, got {value!r}") from None
    if not result.is_finite() or result < 0:
        raise ValueError(f"rate must be a finite non-negative number, got {value}")
    return result


def _validate_positive(value: float, name: str) -> None:
    """Validate that a parameter is positive."""
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
