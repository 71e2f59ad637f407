"""FAQ create/read/update/delete with cache-aside translated answers.

Writes commit to the database first. Update and delete then invalidate the
item's cached translations, and only after that is a new translation job
dispatched, so a reader never sees a cached answer older than the edit.
Cache and translation trouble never fails a request; database trouble
surfaces as InternalError.
"""

import logging
from sqlalchemy.exc import SQLAlchemyError

from faqdesk import db
from faqdesk.errors import InternalError, NotFoundError, ValidationError
from faqdesk.models import FAQ
from faqdesk.services.redis_client import get_cached_answer, invalidate_faq

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = 'en'


def _require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} must be a non-empty string')
    return value


class FaqService:
    """Request-facing FAQ operations."""

    def __init__(self, cache, dispatcher):
        self.cache = cache
        self.dispatcher = dispatcher

    def create(self, question, answer) -> FAQ:
        """Persist a new FAQ and schedule its translation."""
        if not question or not answer:
            raise ValidationError('Missing required fields')
        _require_text(question, 'question')
        _require_text(answer, 'answer')

        faq = FAQ(question=question, answer=answer, translations={})
        try:
            db.session.add(faq)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception('Error creating FAQ')
            raise InternalError() from e

        self._schedule_translation(faq.id)
        return faq

    def list_faqs(self, lang: str = DEFAULT_LANGUAGE) -> list[dict]:
        """All FAQs rendered in ``lang``, falling back to the source text."""
        lang = lang or DEFAULT_LANGUAGE
        try:
            faqs = FAQ.query.order_by(FAQ.created_at).all()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception('Get FAQs error')
            raise InternalError() from e

        response = []
        for faq in faqs:
            cached = get_cached_answer(self.cache, faq.id, lang)
            response.append({
                'id': faq.id,
                'question': faq.get_translated_question(lang),
                'answer': cached or faq.answer,
            })
        return response

    def update(self, faq_id, question=None, answer=None) -> FAQ:
        """Apply a partial update, invalidate cached answers, retranslate."""
        if question is not None:
            _require_text(question, 'question')
        if answer is not None:
            _require_text(answer, 'answer')

        faq = self._get_or_404(faq_id)

        if question is not None and question != faq.question:
            faq.question = question
            # Stored question translations describe the old text
            faq.translations = {}
        if answer is not None:
            faq.answer = answer

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception(f'Update FAQ {faq_id} error')
            raise InternalError() from e

        invalidate_faq(self.cache, faq.id)
        self._schedule_translation(faq.id)
        return faq

    def delete(self, faq_id) -> str:
        """Remove a FAQ and its cached translations. Returns the deleted id."""
        faq = self._get_or_404(faq_id)
        deleted_id = faq.id

        try:
            db.session.delete(faq)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception(f'Delete FAQ {faq_id} error')
            raise InternalError() from e

        invalidate_faq(self.cache, deleted_id)
        return deleted_id

    def _get_or_404(self, faq_id) -> FAQ:
        if not faq_id:
            raise NotFoundError()
        try:
            faq = db.session.get(FAQ, str(faq_id))
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception(f'Lookup of FAQ {faq_id} failed')
            raise InternalError() from e
        if faq is None:
            raise NotFoundError()
        return faq

    def _schedule_translation(self, faq_id: str):
        # Fire-and-forget: a failing dispatcher must not fail the write
        try:
            self.dispatcher.submit(faq_id)
        except RuntimeError as e:
            logger.error(f'Could not schedule translation for FAQ {faq_id}: {e}')
