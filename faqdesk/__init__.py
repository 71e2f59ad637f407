from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
migrate = Migrate()

logger = logging.getLogger(__name__)

DEFAULT_TRANSLATION_LANGUAGES = 'hi,bn,es,fr'


def _database_url():
    url = os.getenv('DATABASE_URL', 'sqlite:///faqdesk.db')
    # Handle Render's postgres:// vs postgresql:// issue
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def create_app(config_name='development', cache=None, provider=None, dispatcher_class=None):
    """Build the Flask app and wire the FAQ services into ``app.extensions``.

    ``cache``, ``provider`` and ``dispatcher_class`` replace the Redis cache,
    the Google Translate client and the thread-pool dispatcher; tests use
    them to inject fakes.
    """
    app = Flask(__name__)

    # Config
    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
        app.config['REDIS_URL'] = None
    else:
        app.config['SQLALCHEMY_DATABASE_URI'] = _database_url()
        app.config['REDIS_URL'] = os.getenv('REDIS_URL')

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['GOOGLE_TRANSLATE_API_KEY'] = os.getenv('GOOGLE_TRANSLATE_API_KEY', '')
    app.config['TRANSLATION_LANGUAGES'] = [
        lang.strip() for lang in
        os.getenv('TRANSLATION_LANGUAGES', DEFAULT_TRANSLATION_LANGUAGES).split(',')
        if lang.strip()
    ]
    app.config['TRANSLATION_CACHE_TTL'] = 3600
    app.config['TRANSLATION_TIMEOUT'] = float(os.getenv('TRANSLATION_TIMEOUT', 10))
    app.config['TRANSLATION_WORKERS'] = int(os.getenv('TRANSLATION_WORKERS', 4))

    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    CORS(app)

    from faqdesk import models  # noqa: F401  (register tables)
    from faqdesk.errors import CacheError
    from faqdesk.services.dispatcher import TranslationDispatcher
    from faqdesk.services.faq_service import FaqService
    from faqdesk.services.redis_client import RedisCache
    from faqdesk.services.translation import GoogleTranslateClient
    from faqdesk.services.translator import FaqTranslator

    if cache is None:
        cache = RedisCache(app.config['REDIS_URL'])
        if app.config['REDIS_URL']:
            try:
                cache.connect()
            except CacheError as e:
                # Keep serving; every lookup is a miss until Redis is back
                logger.error(f'{e}')
        else:
            logger.warning('REDIS_URL not set - translated answers will not be cached')

    if provider is None:
        provider = GoogleTranslateClient(
            app.config['GOOGLE_TRANSLATE_API_KEY'],
            timeout=app.config['TRANSLATION_TIMEOUT'],
        )
    if not provider.enabled:
        logger.warning('GOOGLE_TRANSLATE_API_KEY not set - translation jobs will fail')

    translator = FaqTranslator(
        provider,
        cache,
        languages=app.config['TRANSLATION_LANGUAGES'],
        ttl=app.config['TRANSLATION_CACHE_TTL'],
    )
    dispatcher = (dispatcher_class or TranslationDispatcher)(
        app, translator, max_workers=app.config['TRANSLATION_WORKERS']
    )

    app.extensions['translation_cache'] = cache
    app.extensions['translation_provider'] = provider
    app.extensions['translation_dispatcher'] = dispatcher
    app.extensions['faq_service'] = FaqService(cache, dispatcher)

    # Create tables with error handling
    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f'Could not create database tables: {e}. '
                           'This is OK if database is not ready yet.')

    # Register routes
    from faqdesk.routes import register_routes
    register_routes(app)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        try:
            cache_status = 'ok' if cache.ping() else 'unavailable'
        except CacheError:
            cache_status = 'unavailable'
        return {
            'status': 'ok',
            'cache': cache_status,
            'translation': 'enabled' if provider.enabled else 'disabled',
        }, 200

    return app


def shutdown_app(app):
    """Drain background translation jobs and close the Redis connection."""
    dispatcher = app.extensions.get('translation_dispatcher')
    if dispatcher is not None:
        dispatcher.shutdown(wait=True)

    cache = app.extensions.get('translation_cache')
    if cache is not None:
        cache.disconnect()
