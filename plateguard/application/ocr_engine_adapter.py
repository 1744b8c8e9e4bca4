import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Callable, Optional

from plateguard.core.config import settings
from plateguard.domain.exceptions import OCREngineInitError, OCRProcessError
from plateguard.domain.Interfaces.recognition_worker import IRecognitionWorker
from plateguard.domain.Models.frame import CaptureFrame
from plateguard.domain.Models.recognition import RecognitionOutput
from plateguard.monitoring.metrics import ocr_latency

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    TERMINATED = "terminated"


class OCREngineAdapter:
    """
    Owns one long-lived recognition worker.

    Every call into the worker (construction, recognize, close) runs on a
    dedicated single-thread executor, and `process` is additionally guarded
    by an asyncio.Lock: at most one recognition is in flight, and a call that
    timed out still finishes before the next one starts.
    """

    def __init__(
        self,
        worker_factory: Callable[[], IRecognitionWorker],
        timeout: Optional[float] = None,
    ):
        self.worker_factory = worker_factory
        self.timeout = timeout if timeout is not None else settings.ocr_timeout

        self.state = EngineState.UNINITIALIZED
        self._worker: Optional[IRecognitionWorker] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._init_lock = asyncio.Lock()
        self._process_lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self.state is EngineState.READY

    @property
    def busy(self) -> bool:
        return self._process_lock.locked()

    # ---------------------------------------------------------
    # INITIALIZE
    # ---------------------------------------------------------
    async def initialize(self) -> None:
        if self.state is EngineState.READY:
            return

        async with self._init_lock:
            if self.state is EngineState.READY:
                return

            executor = self._ensure_executor()
            loop = asyncio.get_running_loop()
            try:
                worker = await loop.run_in_executor(executor, self.worker_factory)
            except Exception as exc:
                logger.exception("❌ OCR engine initialization failed")
                raise OCREngineInitError("Failed to initialize OCR engine") from exc

            self._worker = worker
            self.state = EngineState.READY
            logger.info(f"🔤 OCR engine ready ({type(worker).__name__})")

    # ---------------------------------------------------------
    # PROCESS
    # ---------------------------------------------------------
    async def process(self, frame: CaptureFrame) -> RecognitionOutput:
        if self.state is EngineState.TERMINATED:
            raise OCRProcessError("OCR engine was terminated; call initialize() first")
        if self.state is EngineState.UNINITIALIZED:
            await self.initialize()

        async with self._process_lock:
            worker = self._worker
            if worker is None or self._executor is None:
                raise OCRProcessError("OCR engine is not ready")

            loop = asyncio.get_running_loop()
            t0 = time.perf_counter()
            future = loop.run_in_executor(self._executor, worker.recognize, frame)
            try:
                if self.timeout and self.timeout > 0:
                    return await asyncio.wait_for(future, timeout=self.timeout)
                return await future
            except asyncio.TimeoutError as exc:
                logger.error(f"OCR timed out after {self.timeout:.1f}s")
                raise OCRProcessError(f"Recognition timed out after {self.timeout}s") from exc
            except OCRProcessError:
                raise
            except Exception as exc:
                logger.exception("OCR worker failed")
                raise OCRProcessError("Failed to process image") from exc
            finally:
                ocr_latency.observe(time.perf_counter() - t0)

    # ---------------------------------------------------------
    # TERMINATE
    # ---------------------------------------------------------
    async def terminate(self) -> None:
        async with self._init_lock:
            worker, self._worker = self._worker, None
            executor, self._executor = self._executor, None

            if worker is not None and executor is not None:
                loop = asyncio.get_running_loop()
                try:
                    await loop.run_in_executor(executor, worker.close)
                except Exception:
                    logger.exception("Error closing OCR worker")

            if executor is not None:
                executor.shutdown(wait=False, cancel_futures=True)

            if self.state is not EngineState.UNINITIALIZED or worker is not None:
                self.state = EngineState.TERMINATED
                logger.info("🔌 OCR engine terminated")

    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ocr")
        return self._executor

    # ---------------------------------------------------------
    # SCOPE
    # ---------------------------------------------------------
    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.terminate()
