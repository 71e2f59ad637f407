"""
Pytest configuration and fixtures for testing the FAQ API.
"""

import fnmatch
import os
import sys
import pytest
import redis
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from faqdesk import create_app, db
from faqdesk.errors import ProviderError
from faqdesk.models import FAQ
from faqdesk.services.dispatcher import TranslationDispatcher
from faqdesk.services.redis_client import RedisCache

fake = Faker()


class FakeRedis:
    """In-memory stand-in for a redis.Redis connection (decode_responses=True)."""

    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.fail = False
        self.calls = []

    def _check(self, name):
        self.calls.append(name)
        if self.fail:
            raise redis.ConnectionError('Redis connection failed')

    def ping(self):
        self._check('ping')
        return True

    def get(self, key):
        self._check('get')
        return self.store.get(key)

    def set(self, key, value, ex=None):
        self._check('set')
        self.store[key] = value
        self.ttls[key] = ex
        return True

    def scan_iter(self, match='*'):
        self._check('scan_iter')
        return iter([k for k in list(self.store) if fnmatch.fnmatchcase(k, match)])

    def delete(self, *keys):
        self._check('delete')
        deleted = 0
        for key in keys:
            if key in self.store:
                del self.store[key]
                self.ttls.pop(key, None)
                deleted += 1
        return deleted

    def close(self):
        self.calls.append('close')


class StubProvider:
    """Translation provider that tags text with the target language.

    ``fail_on`` makes every call for that language raise ProviderError.
    """

    enabled = True

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.calls = []

    def translate(self, text, target_lang, fmt='text'):
        self.calls.append((text, target_lang, fmt))
        if target_lang == self.fail_on:
            raise ProviderError(f'Google Translate error ({target_lang}): boom')
        return f'[{target_lang}] {text}'


class DeferredDispatcher(TranslationDispatcher):
    """Queue jobs instead of starting threads; tests decide when they run."""

    def __init__(self, app, translator, max_workers=1):
        super().__init__(app, translator, max_workers)
        self.pending = []

    def submit(self, faq_id):
        self.pending.append(faq_id)

    def run_pending(self):
        results = [self.run_job(faq_id) for faq_id in self.pending]
        self.pending = []
        return results


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    return RedisCache(client=fake_redis)


@pytest.fixture
def make_provider():
    return StubProvider


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def app(cache, provider):
    """Create application for testing."""
    app = create_app('testing', cache=cache, provider=provider,
                     dispatcher_class=DeferredDispatcher)

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture
def dispatcher(app):
    return app.extensions['translation_dispatcher']


@pytest.fixture
def service(app):
    return app.extensions['faq_service']


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield


def _create_faq(**overrides):
    """Helper to insert a FAQ row directly, bypassing translation."""
    data = {
        'question': fake.sentence(nb_words=6).rstrip('.') + '?',
        'answer': f'<p>{fake.paragraph()}</p>',
        'translations': {},
    }
    data.update(overrides)
    faq = FAQ(**data)
    db.session.add(faq)
    db.session.commit()
    return {
        'id': faq.id,
        'question': faq.question,
        'answer': faq.answer,
    }


@pytest.fixture
def test_faq(app):
    """Create a FAQ with no translations yet."""
    with app.app_context():
        return _create_faq()


@pytest.fixture
def translated_faq(app):
    """Create a FAQ with a Spanish question translation."""
    with app.app_context():
        return _create_faq(translations={'es': '¿Pregunta?'})
