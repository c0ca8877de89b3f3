"""Receipt storage.

Receipts are kept behind the ReceiptStore interface so the API never touches
a shared map directly. The in-memory implementation guards its map with a
lock because FastAPI runs sync handlers in a threadpool.

Identifier generation retries on collision using tenacity, the same way the
rest of the platform retries transient failures.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable

from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt

from receipt_processor.receipts.schema import Receipt

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


class ReceiptStoreError(Exception):
    """Base class for receipt storage errors."""


class ReceiptNotFoundError(ReceiptStoreError):
    """No receipt is stored under the requested id."""

    def __init__(self, receipt_id: str) -> None:
        super().__init__(f"No receipt found for id: {receipt_id}")
        self.receipt_id = receipt_id


class DuplicateReceiptIdError(ReceiptStoreError):
    """A receipt is already stored under the id."""

    def __init__(self, receipt_id: str) -> None:
        super().__init__(f"Receipt id already in use: {receipt_id}")
        self.receipt_id = receipt_id


class IdentifierGenerationError(ReceiptStoreError):
    """A usable receipt id could not be generated."""


class ReceiptStore(ABC):
    """Interface for receipt storage keyed by id.

    Stored receipts are never updated or deleted.
    """

    @abstractmethod
    def put(self, receipt_id: str, receipt: Receipt) -> None:
        """Store a receipt under a new id.

        Args:
            receipt_id: Id to store the receipt under
            receipt: Accepted receipt

        Raises:
            DuplicateReceiptIdError: If the id is already in use
        """
        pass

    @abstractmethod
    def get(self, receipt_id: str) -> Receipt:
        """Look up a receipt by id.

        Args:
            receipt_id: Id returned when the receipt was stored

        Returns:
            The stored receipt

        Raises:
            ReceiptNotFoundError: If no receipt has this id
        """
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class InMemoryReceiptStore(ReceiptStore):
    """Process-local receipt store; contents are lost on restart."""

    def __init__(self) -> None:
        self._receipts: dict[str, Receipt] = {}
        self._lock = threading.Lock()

    def put(self, receipt_id: str, receipt: Receipt) -> None:
        with self._lock:
            if receipt_id in self._receipts:
                raise DuplicateReceiptIdError(receipt_id)
            self._receipts[receipt_id] = receipt

    def get(self, receipt_id: str) -> Receipt:
        with self._lock:
            receipt = self._receipts.get(receipt_id)
        if receipt is None:
            raise ReceiptNotFoundError(receipt_id)
        return receipt

    def __len__(self) -> int:
        with self._lock:
            return len(self._receipts)


def generate_receipt_id() -> str:
    """Generate a random UUID4 receipt id."""
    return str(uuid.uuid4())


def save_receipt(
    store: ReceiptStore,
    receipt: Receipt,
    id_factory: IdFactory = generate_receipt_id,
    max_attempts: int = 3,
) -> str:
    """Assign a new id to a receipt and store it.

    A generated id that is already in use is discarded and a new one is
    generated, up to max_attempts times.

    Args:
        store: Store to save into
        receipt: Accepted receipt
        id_factory: Zero-argument callable returning a new id
        max_attempts: Attempts before giving up on collisions

    Returns:
        The id the receipt was stored under

    Raises:
        IdentifierGenerationError: If the id factory fails or every
            generated id collides
    """

    def attempt() -> str:
        try:
            receipt_id = id_factory()
        except Exception as e:
            raise IdentifierGenerationError(f"Receipt id generation failed: {e}") from e

        store.put(receipt_id, receipt)
        return receipt_id

    retrying = Retrying(
        retry=retry_if_exception_type(DuplicateReceiptIdError),
        stop=stop_after_attempt(max_attempts),
    )

    try:
        receipt_id = retrying(attempt)
    except RetryError as e:
        logger.error(f"Gave up generating a receipt id after {max_attempts} attempts")
        raise IdentifierGenerationError(
            f"Could not generate an unused receipt id after {max_attempts} attempts"
        ) from e.last_attempt.exception()

    logger.info(f"Stored receipt {receipt_id}")
    return receipt_id
