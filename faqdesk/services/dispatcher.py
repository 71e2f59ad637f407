"""Fire-and-forget dispatch of background translation jobs."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from flask import current_app, has_app_context

from faqdesk.errors import TranslationError

logger = logging.getLogger(__name__)


class TranslationDispatcher:
    """Run FaqTranslator jobs on a thread pool.

    submit() returns as soon as the job is queued. Nothing flows back to the
    caller: a failed job is only reported in the log.
    """

    def __init__(self, app, translator, max_workers: int = 4):
        self.app = app
        self.translator = translator
        self.max_workers = max_workers
        self._executor = None
        # Request threads share one pool
        self._lock = threading.Lock()

    def start(self):
        with self._lock:
            return self._ensure_executor()

    def _ensure_executor(self):
        # Caller holds self._lock
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix='faq-translate',
            )
            logger.info(f'Translation dispatcher started ({self.max_workers} workers)')
        return self._executor

    def submit(self, faq_id: str):
        """Queue a translation job for ``faq_id``."""
        with self._lock:
            future = self._ensure_executor().submit(self.run_job, faq_id)
        logger.debug(f'Queued translation job for FAQ {faq_id}')
        return future

    def run_job(self, faq_id: str) -> bool:
        """Run one job to completion. Never raises."""
        if has_app_context() and current_app._get_current_object() is self.app:
            return self._run(faq_id)
        with self.app.app_context():
            return self._run(faq_id)

    def _run(self, faq_id):
        try:
            return self.translator.translate_faq(faq_id)
        except TranslationError as e:
            logger.error(f'Translation Failed: {e}')
        except Exception:
            logger.exception(f'Unexpected error translating FAQ {faq_id}')
        return False

    def shutdown(self, wait: bool = True):
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is None:
            return
        executor.shutdown(wait=wait)
        logger.info('Translation dispatcher stopped')
