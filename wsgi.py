import atexit
import os
from faqdesk import create_app, shutdown_app

config_name = os.getenv('FLASK_ENV', 'development')
app = create_app(config_name)

# Let queued translation jobs finish and close Redis on exit
atexit.register(shutdown_app, app)

if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))

    # CRITICAL: Never run debug mode in production
    debug_mode = os.getenv('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes')

    app.run(host='0.0.0.0', port=port, debug=debug_mode)
