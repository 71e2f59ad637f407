"""Background translation of a single FAQ into every target language.

For each language the question and the answer are translated separately.
Answer translations go straight into the Redis cache as they arrive;
question translations are collected and written to the FAQ row once, after
every language succeeded. A provider failure aborts the job before that
save, so the row never holds a partial pass. Answers already cached for
earlier languages stay cached.
"""

import logging
from sqlalchemy.exc import SQLAlchemyError

from faqdesk import db
from faqdesk.errors import ProviderError, TranslationError
from faqdesk.models import FAQ
from faqdesk.services.redis_client import TRANSLATION_TTL, cache_answer
from faqdesk.services.translation import FORMAT_HTML, FORMAT_TEXT

logger = logging.getLogger(__name__)

TARGET_LANGUAGES = ('hi', 'bn', 'es', 'fr')


class FaqTranslator:
    """Translate FAQs with a provider client and record the results."""

    def __init__(self, provider, cache, languages=TARGET_LANGUAGES, ttl: int = TRANSLATION_TTL):
        self.provider = provider
        self.cache = cache
        self.languages = tuple(languages)
        self.ttl = ttl

    def translate_faq(self, faq_id: str) -> bool:
        """
        Translate one FAQ into all target languages.

        Must run inside an application context.

        Returns:
            True when translations were saved, False when the FAQ no longer
            exists

        Raises:
            TranslationError: a provider call or the final save failed
        """
        faq = db.session.get(FAQ, faq_id)
        if faq is None:
            logger.info(f'FAQ {faq_id} was deleted before translation, skipping')
            return False

        translations = dict(faq.translations or {})

        for lang in self.languages:
            try:
                question = self.provider.translate(faq.question, lang, FORMAT_TEXT)
                answer = self.provider.translate(faq.answer, lang, FORMAT_HTML)
            except ProviderError as e:
                raise TranslationError(faq_id, str(e)) from e

            translations[lang] = question
            cache_answer(self.cache, faq_id, lang, answer, self.ttl)

        # Reassign so SQLAlchemy sees the JSON column change
        faq.translations = translations
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise TranslationError(faq_id, f'could not save translations: {e}') from e

        logger.info(f'FAQ {faq_id} translated into {", ".join(self.languages)}')
        return True
