"""Product catalog sources.

``StaticCatalog`` serves a fixed table. ``FeedCatalog`` reads the published
CSV feed through a two-level cache:

* the short tier lives in process memory with a 30s lifetime;
* the long tier is persisted to the data dir with a 60s lifetime;
* a fresh long-tier hit is promoted into the short tier, never past the
  long entry's own expiry;
* a successful fetch rewrites both tiers;
* a failed fetch falls back to whichever tier still holds data, expired or not.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from freshbill import config as _config
from freshbill.models.product import DEFAULT_PRODUCTS, Product
from freshbill.services.exceptions import FeedDecodeError, FeedError
from freshbill.services.feed import decode_products, fetch_feed
from freshbill.services.notices import Notify, log_notify
from freshbill.services.storage import JsonFileStore, KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    products: tuple[Product, ...]
    fetched_at: float
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at

    @classmethod
    def from_dict(cls, d: dict) -> CacheEntry:
        return cls(
            products=tuple(Product.from_dict(p) for p in d["products"]),
            fetched_at=float(d["timestamp"]),
            expires_at=float(d["expiresAt"]),
        )

    def to_dict(self) -> dict:
        return {
            "products": [p.to_dict() for p in self.products],
            "timestamp": self.fetched_at,
            "expiresAt": self.expires_at,
        }


class CacheTier:
    """One independently expiring location for the catalog."""

    def __init__(self, store: KeyValueStore, key: str, ttl: float) -> None:
        self.store = store
        self.key = key
        self.ttl = ttl

    def read(self) -> CacheEntry | None:
        raw = self.store.get(self.key)
        if raw is None:
            return None
        try:
            return CacheEntry.from_dict(raw)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable catalog cache %s", self.key)
            self.store.remove(self.key)
            return None

    def put(self, entry: CacheEntry) -> None:
        self.store.set(self.key, entry.to_dict())

    def write(self, products: Sequence[Product], now: float) -> CacheEntry:
        entry = CacheEntry(tuple(products), fetched_at=now, expires_at=now + self.ttl)
        self.put(entry)
        return entry

    def evict(self) -> None:
        self.store.remove(self.key)


class TieredProductCache:
    def __init__(self, short: CacheTier, long: CacheTier) -> None:
        self.short = short
        self.long = long

    def fresh(self, now: float) -> list[Product] | None:
        """Return unexpired products, promoting a long-tier hit into the short tier."""
        entry = self.short.read()
        if entry is not None and entry.is_fresh(now):
            return list(entry.products)

        entry = self.long.read()
        if entry is not None and entry.is_fresh(now):
            self.short.put(
                CacheEntry(
                    entry.products,
                    fetched_at=entry.fetched_at,
                    expires_at=min(now + self.short.ttl, entry.expires_at),
                )
            )
            return list(entry.products)
        return None

    def stale(self) -> list[Product] | None:
        """Return the most recently fetched products from any tier, ignoring expiry."""
        entries = [e for e in (self.short.read(), self.long.read()) if e is not None]
        if not entries:
            return None
        latest = max(entries, key=lambda e: e.fetched_at)
        return list(latest.products)

    def store(self, products: Sequence[Product], now: float) -> None:
        self.long.write(products, now)
        self.short.write(products, now)

    def evict_all(self) -> None:
        self.short.evict()
        self.long.evict()


class StaticCatalog:
    """Fixed product table; every load returns the same list."""

    source = "static"

    def __init__(self, products: Sequence[Product], notify: Notify = log_notify) -> None:
        self._products = list(products)
        self.notify = notify
        self.loading = False

    def load_products(self, force_refresh: bool = False) -> list[Product]:
        return list(self._products)

    def refresh(self) -> list[Product] | None:
        return self.load_products(force_refresh=True)

    def clear_caches(self) -> list[Product] | None:
        self.notify("Static catalog has no cache to clear", "information")
        return self.load_products(force_refresh=True)


class FeedCatalog:
    """Catalog backed by the remote CSV feed and a TieredProductCache."""

    source = "feed"

    def __init__(
        self,
        url: str,
        cache: TieredProductCache,
        notify: Notify = log_notify,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.url = url
        self.cache = cache
        self.notify = notify
        self._clock = clock
        self.loading = False

    def load_products(self, force_refresh: bool = False) -> list[Product]:
        now = self._clock()
        if force_refresh:
            self.cache.evict_all()
        else:
            cached = self.cache.fresh(now)
            if cached is not None:
                return cached

        self.loading = True
        try:
            return self._fetch(now)
        finally:
            self.loading = False

    def _fetch(self, now: float) -> list[Product]:
        try:
            products = decode_products(fetch_feed(self.url, now))
        except (FeedError, FeedDecodeError) as exc:
            logger.warning("Catalog load failed: %s", exc)
            stale = self.cache.stale()
            if stale is not None:
                self.notify(
                    f"Catalog offline, showing {len(stale)} cached product(s)",
                    "warning",
                )
                return stale
            self.notify(f"Could not load products: {exc}", "error")
            return []

        self.cache.store(products, now)
        self.notify(f"Loaded {len(products)} product(s)", "information")
        return products

    def refresh(self) -> list[Product] | None:
        """Force a reload unless one is already running (returns None then)."""
        if self.loading:
            self.notify("Products are already loading…", "information")
            return None
        return self.load_products(force_refresh=True)

    def clear_caches(self) -> list[Product] | None:
        self.cache.evict_all()
        self.notify("Product caches cleared", "information")
        return self.refresh()


Catalog = StaticCatalog | FeedCatalog


def build_catalog(
    notify: Notify = log_notify,
    *,
    durable: KeyValueStore | None = None,
    session: KeyValueStore | None = None,
) -> Catalog:
    """Pick the catalog variant from config: the feed when FRESHBILL_FEED_URL is set."""
    url = _config.get_feed_url()
    if url is None:
        rows = _config.load_static_products()
        products = [Product.from_dict(r) for r in rows] if rows else DEFAULT_PRODUCTS
        return StaticCatalog(products, notify)

    cache = TieredProductCache(
        short=CacheTier(
            session if session is not None else MemoryStore(),
            _config.PRODUCTS_SHORT_KEY,
            _config.SHORT_TIER_TTL,
        ),
        long=CacheTier(
            durable if durable is not None else JsonFileStore(_config.get_data_dir()),
            _config.PRODUCTS_LONG_KEY,
            _config.LONG_TIER_TTL,
        ),
    )
    return FeedCatalog(url, cache, notify)
