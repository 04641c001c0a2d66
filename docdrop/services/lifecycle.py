"""
Document lifecycle service.
Creates, serves and expires documents under the storage root.
"""

import asyncio
import logging
from typing import AsyncIterable, BinaryIO, Set

from starlette.concurrency import run_in_threadpool

from docdrop.config import Settings
from docdrop.exceptions import (
    CapacityExceededError,
    DocumentNotFoundError,
    EmptyDocumentError,
    StorageError,
)
from docdrop.models import CreateOptions, DocumentState, validate_name_params
from docdrop.services.allocator import allocate_name
from docdrop.services.scheduler import ExpiryScheduler
from docdrop.utils.counter import DocumentCounter
from docdrop.utils.storage import DocumentStorage, is_safe_name

logger = logging.getLogger(__name__)


class DocumentManager:
    """
    Owns the document root and every document's lifecycle.

    A document moves Reserved -> Stored -> Deleted. Creation is serialized
    by a single lock around name allocation and reservation; reads and
    expiries never take it. The set of names mirrors the root listing
    (reservations included) and is rebuilt by bootstrap().
    """

    def __init__(self, settings: Settings, storage: DocumentStorage | None = None):
        self.settings = settings
        self.storage = storage or DocumentStorage(settings.DOCS_ROOT)
        self.counter = DocumentCounter()
        self.scheduler = ExpiryScheduler(self._expire)
        self._create_lock = asyncio.Lock()
        self._names: Set[str] = set()
        self._reserved: Set[str] = set()

    @property
    def document_count(self) -> int:
        return self.counter.value

    def state(self, name: str) -> DocumentState:
        """Lifecycle state of name as seen by this process."""
        if name in self._reserved:
            return DocumentState.RESERVED
        if name in self._names:
            return DocumentState.STORED
        return DocumentState.DELETED

    async def bootstrap(self) -> int:
        """
        Re-arm expiry for every document already in the root.

        Nothing about the original lifetimes survives a restart, so each
        document gets the default lifetime. Empty files are leftovers of
        uploads interrupted by a crash and are removed.

        Returns:
            Number of documents recovered
        """
        await run_in_threadpool(self.storage.ensure_root)
        entries = await run_in_threadpool(self.storage.scan)

        recovered = 0
        for name, size in entries:
            if size == 0:
                logger.warning("Removing empty leftover document %s", name)
                await run_in_threadpool(self.storage.delete, name)
                continue
            self._names.add(name)
            self.counter.increment()
            self.schedule_deletion(name, self.settings.DEFAULT_LIFETIME)
            recovered += 1

        logger.info(
            "Recovered %d documents from %s, expiring in %.0fs",
            recovered, self.storage.root, self.settings.DEFAULT_LIFETIME,
        )
        return recovered

    async def create(
        self,
        body: AsyncIterable[bytes],
        options: CreateOptions | None = None,
    ) -> str:
        """
        Store a new document and return its generated name.

        Args:
            body: Payload chunks; bytes beyond MAX_DOC_SIZE are dropped
            options: Per-request lifetime and name overrides

        Raises:
            InvalidRequestError: bad name parameters or empty payload
            CapacityExceededError: the store already holds MAX_DOC_COUNT documents
            NameSpaceExhaustedError: no free name for the alphabet/length
            StorageError: the payload could not be written
        """
        options = options or CreateOptions()
        lifetime = options.lifetime
        if lifetime is None:
            lifetime = self.settings.DEFAULT_LIFETIME
        alphabet = options.name_alphabet or self.settings.DEFAULT_NAME_CHARSET
        length = options.name_length
        if length is None:
            length = self.settings.DEFAULT_NAME_LENGTH
        alphabet = validate_name_params(alphabet, length)

        # >= because documents recovered at boot may exceed the maximum
        count = self.counter.value
        if count >= self.settings.MAX_DOC_COUNT:
            raise CapacityExceededError(count, self.settings.MAX_DOC_COUNT)

        async with self._create_lock:
            name, handle = await self._reserve(alphabet, length)

        try:
            written = await self._write(name, handle, body)
        except OSError as e:
            await self._discard(name)
            raise StorageError(f"Could not write document: {e}") from e
        except BaseException:
            await self._discard(name)
            raise

        if written == 0:
            await self._discard(name)
            raise EmptyDocumentError()

        self._reserved.discard(name)
        self.counter.increment()
        self.schedule_deletion(name, lifetime)
        logger.info("Stored %s (%d bytes, lifetime %.0fs)", name, written, lifetime)
        return name

    async def read(self, name: str) -> BinaryIO:
        """
        Open a stored document for reading.

        Raises:
            DocumentNotFoundError: unknown, expired or still being written
            StorageError: the file exists but could not be opened
        """
        if not is_safe_name(name) or name in self._reserved:
            raise DocumentNotFoundError(name)
        try:
            handle = await run_in_threadpool(self.storage.open, name)
        except FileNotFoundError as e:
            raise DocumentNotFoundError(name) from e
        except OSError as e:
            raise StorageError(f"Could not read document: {e}") from e

        # A create may have reserved the name while the file was being opened
        if name in self._reserved:
            await run_in_threadpool(handle.close)
            raise DocumentNotFoundError(name)
        return handle

    def schedule_deletion(self, name: str, lifetime: float) -> None:
        """Delete name after lifetime seconds. Cannot be extended."""
        self.scheduler.schedule(name, lifetime)

    async def shutdown(self) -> None:
        """Stop pending expiries; the files stay for the next bootstrap."""
        pending = len(self.scheduler)
        await self.scheduler.shutdown()
        logger.info("Stopped with %d documents pending expiry", pending)

    async def _reserve(self, alphabet: str, length: int) -> tuple[str, BinaryIO]:
        while True:
            name = allocate_name(
                alphabet, length, self._names, self.settings.NAME_MAX_ATTEMPTS
            )
            # Mark the name reserved before the file exists so that no
            # reader can open it between creation and bookkeeping.
            self._names.add(name)
            self._reserved.add(name)

            reservation = asyncio.ensure_future(run_in_threadpool(self.storage.reserve, name))
            try:
                handle = await asyncio.shield(reservation)
            except FileExistsError:
                logger.warning("Found %s on disk but not in the index", name)
                self._reserved.discard(name)
                continue
            except OSError as e:
                self._names.discard(name)
                self._reserved.discard(name)
                raise StorageError(f"Could not reserve document: {e}") from e
            except asyncio.CancelledError:
                # The worker thread still runs to completion
                reservation.add_done_callback(
                    lambda future, name=name: self._abandon_reservation(name, future)
                )
                raise
            return name, handle

    def _abandon_reservation(self, name: str, reservation: asyncio.Future) -> None:
        """Undo a reservation whose creator was cancelled."""
        self._reserved.discard(name)
        if reservation.cancelled():
            self._names.discard(name)
            return
        error = reservation.exception()
        if isinstance(error, FileExistsError):
            return
        if error is None:
            reservation.result().close()
            try:
                self.storage.delete(name)
            except OSError:
                logger.exception("Could not remove reservation %s", name)
                return
        self._names.discard(name)
        logger.info("Abandoned reservation %s", name)

    async def _write(self, name: str, handle: BinaryIO, body: AsyncIterable[bytes]) -> int:
        limit = self.settings.MAX_DOC_SIZE
        written = 0
        truncated = False
        try:
            async for chunk in body:
                if not chunk:
                    continue
                if written + len(chunk) > limit:
                    chunk = chunk[:limit - written]
                    truncated = True
                if chunk:
                    await run_in_threadpool(handle.write, chunk)
                    written += len(chunk)
                if truncated:
                    break
        finally:
            await run_in_threadpool(handle.close)

        if truncated:
            logger.warning("Truncated %s to %d bytes", name, limit)
        return written

    async def _discard(self, name: str) -> None:
        """Roll back a reservation."""
        try:
            await run_in_threadpool(self.storage.delete, name)
        except OSError:
            logger.exception("Could not remove reservation %s", name)
        else:
            self._names.discard(name)
        finally:
            self._reserved.discard(name)

    async def _expire(self, name: str) -> None:
        try:
            existed = await run_in_threadpool(self.storage.delete, name)
        except OSError:
            logger.exception("Could not delete expired document %s", name)
        else:
            self._names.discard(name)
            if existed:
                logger.info("Expired %s", name)
            else:
                logger.info("Expired %s (already gone)", name)
        finally:
            self.counter.decrement()
