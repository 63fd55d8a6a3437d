from __future__ import annotations

import itertools
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Iterator


class IdGenerator(ABC):
    @abstractmethod
    def new_id(self, prefix: str) -> str: ...


class UuidIdGenerator(IdGenerator):
    """Random ids like ``TX-1a2b3c4d``."""

    def new_id(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex[:8]}"


class SequentialIdGenerator(IdGenerator):
    """
    Deterministic ids: ``ORD-0001``, ``ORD-0002``, ``PAY-0001``...
    One counter per prefix.
    """

    def __init__(self) -> None:
        self._counters: Dict[str, Iterator[int]] = {}
        self._lock = threading.Lock()

    def new_id(self, prefix: str) -> str:
        with self._lock:
            counter = self._counters.setdefault(prefix, itertools.count(1))
            return f"{prefix}-{next(counter):04d}"
