"""
Identifier Allocation

Hands out random UUID4 identifiers that are unique within their
namespace across all rooms.
"""

import logging
import threading
import uuid
from enum import Enum
from typing import Callable, Dict, Set

logger = logging.getLogger(__name__)


class IdNamespace(Enum):
    """Independent identifier namespaces."""

    USER = "user"
    MESSAGE = "message"


class IdentifierAllocator:
    """
    Allocates collision-free identifiers per namespace.

    Every namespace keeps the set of identifiers currently in use and its
    own lock, so the check-then-reserve step is atomic even when handlers
    run on several threads.
    """

    def __init__(self, id_factory: Callable[[], str] = None):
        """
        Initialize the allocator.

        Args:
            id_factory: Source of fresh random identifiers. Defaults to
                        string UUID4s.
        """
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._in_use: Dict[IdNamespace, Set[str]] = {
            namespace: set() for namespace in IdNamespace
        }
        self._locks: Dict[IdNamespace, threading.Lock] = {
            namespace: threading.Lock() for namespace in IdNamespace
        }

    def allocate(self, namespace: IdNamespace) -> str:
        """
        Reserve and return a new identifier.

        Args:
            namespace: The namespace to allocate in

        Returns:
            str: An identifier not in use in ``namespace``
        """
        with self._locks[namespace]:
            in_use = self._in_use[namespace]
            candidate = self._id_factory()
            while candidate in in_use:
                logger.debug(
                    f"Identifier collision in {namespace.value} namespace, "
                    f"drawing again"
                )
                candidate = self._id_factory()
            in_use.add(candidate)
            return candidate

    def is_in_use(self, namespace: IdNamespace, identifier: str) -> bool:
        with self._locks[namespace]:
            return identifier in self._in_use[namespace]
