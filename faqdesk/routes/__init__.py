"""Routes package for the FAQ backend."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .faqs import faqs_bp

    app.register_blueprint(faqs_bp, url_prefix='/api/faqs')
