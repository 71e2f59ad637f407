"""FAQ routes: create, list in a language, update and delete."""

from flask import Blueprint, request, jsonify, current_app

from faqdesk.errors import FaqError, ValidationError

faqs_bp = Blueprint('faqs', __name__)


def get_faq_service():
    return current_app.extensions['faq_service']


def error_response(error: FaqError):
    return jsonify(error.to_dict()), error.status_code


def get_json_body():
    """Request JSON as a dict; an absent or unparseable body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


@faqs_bp.route('', methods=['POST'])
def create_faq():
    """Create a FAQ. Translations are produced in the background."""
    try:
        data = get_json_body()
        faq = get_faq_service().create(data.get('question'), data.get('answer'))
    except FaqError as e:
        return error_response(e)

    return jsonify({
        'id': faq.id,
        'question': faq.question,
        'answer': faq.answer,
        'translations': dict(faq.translations or {}),
        'message': 'FAQ created. Translations in progress.'
    }), 201


@faqs_bp.route('', methods=['GET'])
def get_faqs():
    """List all FAQs.

    Query params:
    - lang: Language code to render in (default: en). Missing translations
      fall back to the English source text.
    """
    lang = request.args.get('lang') or 'en'

    try:
        faqs = get_faq_service().list_faqs(lang)
    except FaqError as e:
        return error_response(e)

    return jsonify(faqs), 200


@faqs_bp.route('', methods=['PUT'])
@faqs_bp.route('/<faq_id>', methods=['PUT'])
def update_faq(faq_id=None):
    """Update question and/or answer. Cached translations are dropped."""
    faq_id = faq_id or request.args.get('id')
    try:
        data = get_json_body()
        faq = get_faq_service().update(faq_id, data.get('question'), data.get('answer'))
    except FaqError as e:
        return error_response(e)

    return jsonify({
        'id': faq.id,
        'question': faq.question,
        'answer': faq.answer,
        'translations': dict(faq.translations or {}),
        'message': 'FAQ updated. Retranslating content'
    }), 200


@faqs_bp.route('', methods=['DELETE'])
@faqs_bp.route('/<faq_id>', methods=['DELETE'])
def delete_faq(faq_id=None):
    faq_id = faq_id or request.args.get('id')

    try:
        deleted_id = get_faq_service().delete(faq_id)
    except FaqError as e:
        return error_response(e)

    return jsonify({
        'message': 'FAQ deleted',
        'deleted_id': deleted_id
    }), 200
