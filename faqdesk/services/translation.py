"""Google Cloud Translation (v2) client used by the background translator."""

import logging
import requests

from faqdesk.errors import ProviderError

logger = logging.getLogger(__name__)

GOOGLE_TRANSLATE_URL = 'https://translation.googleapis.com/language/translate/v2'

# Values of the v2 "format" field
FORMAT_TEXT = 'text'
FORMAT_HTML = 'html'

DEFAULT_TIMEOUT = 10  # seconds


class GoogleTranslateClient:
    """Translate single strings through the Google Translate REST API.

    One call per (text, target language). Failures raise ProviderError and
    are never retried here.
    """

    def __init__(self, api_key: str, url: str = GOOGLE_TRANSLATE_URL,
                 timeout: float = DEFAULT_TIMEOUT, session=None):
        self.api_key = (api_key or '').strip()
        self.url = url
        self.timeout = timeout
        self.session = session or requests

    @property
    def enabled(self) -> bool:
        """True when an API key is configured."""
        return bool(self.api_key)

    def translate(self, text: str, target_lang: str, fmt: str = FORMAT_TEXT) -> str:
        """
        Translate ``text`` into ``target_lang``.

        Args:
            text: Source text (plain text or HTML)
            target_lang: Target language code (hi, bn, es, fr, ...)
            fmt: FORMAT_TEXT or FORMAT_HTML; HTML keeps markup intact

        Returns:
            The translated text

        Raises:
            ProviderError: missing key, transport error, non-2xx status or
                a response without a translation in it
        """
        if not self.enabled:
            raise ProviderError('GOOGLE_TRANSLATE_API_KEY is not configured')

        if fmt not in (FORMAT_TEXT, FORMAT_HTML):
            raise ValueError(f'Unsupported translation format: {fmt}')

        params = {'key': self.api_key, 'alt': 'json'}
        payload = {'q': text, 'target': target_lang, 'format': fmt}

        try:
            response = self.session.post(self.url, params=params, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise ProviderError(f'Google Translate timeout ({target_lang})') from e
        except requests.RequestException as e:
            raise ProviderError(f'Google Translate request failed ({target_lang}): {e}') from e

        try:
            result = response.json()
        except ValueError:
            result = None

        if not 200 <= response.status_code < 300:
            message = _error_message(result) or f'HTTP {response.status_code}'
            raise ProviderError(f'Google Translate error ({target_lang}): {message}',
                                status_code=response.status_code)

        try:
            translated = result['data']['translations'][0]['translatedText']
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f'Google Translate unexpected response format ({target_lang})') from e

        logger.debug(f'Translated {len(text)} chars into {target_lang} ({fmt})')
        return translated


def _error_message(result) -> str:
    """Pull the message out of a Google API error envelope."""
    if not isinstance(result, dict):
        return None
    error = result.get('error')
    if isinstance(error, dict):
        message = error.get('message')
        # Invalid keys fail every call; call them out in the log
        for detail in error.get('details') or []:
            if isinstance(detail, dict) and detail.get('reason') == 'API_KEY_INVALID':
                return f'API key invalid: {message}'
        return message
    if isinstance(error, str):
        return error
    return None
