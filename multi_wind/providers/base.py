"""
Base class and schema helpers shared by the wind providers.

Every provider implements the same three operations: build its request URL,
supply its request headers and turn a decoded JSON document into a
WindObservation. Schema walking is explicit: the first missing or
wrong-typed link raises SchemaMismatch naming the exact path.
"""

import json
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Dict

from multi_wind.config import ProviderConfig
from multi_wind.models import Provider, WindObservation
from multi_wind.resilience import MalformedBody, SchemaMismatch

logger = logging.getLogger(__name__)


class WindProvider(ABC):
    """One wind data provider."""

    provider: Provider

    # Sent with every request; subclasses override.
    HEADERS: Dict[str, str] = {"Accept": "application/json"}

    @abstractmethod
    def build_url(self, config: ProviderConfig) -> str:
        """Build the request URL for the configured location."""

    def headers(self) -> Dict[str, str]:
        return dict(self.HEADERS)

    @abstractmethod
    def parse(self, data: Any) -> WindObservation:
        """Extract the current wind from a decoded JSON document."""

    def parse_body(self, raw_body: bytes) -> WindObservation:
        """
        Decode a raw response body and extract the current wind.

        Raises:
            MalformedBody: body is not valid JSON
            SchemaMismatch: document does not match the provider schema
        """
        try:
            data = json.loads(raw_body)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, UnicodeDecodeError, over-long integers, deep nesting
            logger.error(f"[{self.provider.name}] Error parsing response: {type(e).__name__}: {str(e)[:200]}")
            logger.debug(f"[{self.provider.name}] Raw response: {raw_body[:500]!r}")
            raise MalformedBody(str(e)) from e

        return self.parse(data)

    # -- schema helpers -------------------------------------------------

    def require_key(self, obj: Any, key: str, path: str) -> Any:
        """Return obj[key] or raise SchemaMismatch for path."""
        if not isinstance(obj, dict):
            raise SchemaMismatch(self.provider, path, f"parent is {type(obj).__name__}, not an object")
        if key not in obj or obj[key] is None:
            raise SchemaMismatch(self.provider, path)
        return obj[key]

    def require_first(self, seq: Any, path: str) -> Any:
        """Return seq[0] or raise SchemaMismatch for path."""
        if not isinstance(seq, list):
            raise SchemaMismatch(self.provider, path, f"parent is {type(seq).__name__}, not an array")
        if not seq:
            raise SchemaMismatch(self.provider, path, "missing (empty array)")
        return seq[0]

    def require_number(self, value: Any, path: str) -> float:
        """Return value as float or raise SchemaMismatch for path."""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SchemaMismatch(self.provider, path, f"is {type(value).__name__}, not a number")
        try:
            finite = math.isfinite(value)
        except OverflowError:
            finite = False
        if not finite:
            raise SchemaMismatch(self.provider, path, "is not a finite number")
        return float(value)
