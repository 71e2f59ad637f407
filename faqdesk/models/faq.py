"""FAQ model: the durable record and source of truth for FAQ content."""

import uuid
from datetime import datetime
from faqdesk import db


def generate_faq_id() -> str:
    """Opaque 32-char id for new FAQ rows."""
    return uuid.uuid4().hex


class FAQ(db.Model):
    """A question/answer pair plus its per-language question translations.

    Answer translations are not stored here; they live in the Redis
    translation cache and are regenerated by the background translator.
    """

    __tablename__ = 'faqs'

    id = db.Column(db.String(32), primary_key=True, default=generate_faq_id)
    question = db.Column(db.Text, nullable=False)  # English plain text
    answer = db.Column(db.Text, nullable=False)  # HTML from the WYSIWYG editor
    translations = db.Column(db.JSON, nullable=False, default=dict)  # lang code -> question

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def get_translated_question(self, lang: str) -> str:
        """Return the question in ``lang``, falling back to the source question."""
        translations = self.translations or {}
        return translations.get(lang) or self.question

    def to_dict(self):
        """Convert FAQ to dictionary."""
        return {
            'id': self.id,
            'question': self.question,
            'answer': self.answer,
            'translations': dict(self.translations or {}),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<FAQ {self.id}: {self.question[:40]}>'
