# =============================================================================
# CropHealth Monitor Backend
# app.py - Application Factory & Entry Point
#
# Flask application factory pattern implementation with extension
# initialization, blueprint registration, error handlers, and analysis
# engine setup.
# =============================================================================

import os
import logging
from flask import Flask, jsonify
from config import config
from extensions import cors, limiter


def create_app(config_name=None):
    """
    Application factory function.

    Creates and configures the Flask application with all extensions,
    blueprints, and error handlers.

    Args:
        config_name: Configuration environment ('development', 'testing', 'production')
                    Defaults to FLASK_ENV environment variable or 'development'

    Returns:
        Flask: Configured Flask application instance
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config.get(config_name, config['default']))

    setup_logging(app)
    init_extensions(app)
    register_blueprints(app)
    register_error_handlers(app)
    init_analysis_service(app)

    app.logger.info(f"CropHealth Monitor API started in {config_name} mode")

    return app


def setup_logging(app):
    """
    Configure application logging.

    Sets up logging format, level, and handlers based on environment.
    """
    log_level = logging.DEBUG if app.config['DEBUG'] else logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    app.logger.setLevel(log_level)


def init_extensions(app):
    """
    Initialize Flask extensions with the application instance.

    Extensions are created in extensions.py without app context,
    then initialized here with the app instance.
    """
    cors.init_app(
        app,
        origins=app.config.get('CORS_ORIGINS', ['http://localhost:3000']),
        supports_credentials=app.config.get('CORS_SUPPORTS_CREDENTIALS', True),
        allow_headers=['Content-Type', 'Authorization'],
        methods=['GET', 'POST', 'OPTIONS']
    )

    limiter.init_app(app)

    app.logger.info("Flask extensions initialized")


def register_blueprints(app):
    """
    Register all API route blueprints.

    All API routes are prefixed with '/api'.
    """
    from routes.analyze import analyze_bp
    from routes.crops import crops_bp

    app.register_blueprint(analyze_bp, url_prefix='/api/analyze')
    app.register_blueprint(crops_bp, url_prefix='/api/crops')

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint for monitoring and load balancers."""
        return jsonify({
            'status': 'healthy',
            'message': 'CropHealth Monitor API is running',
            'version': '1.0.0',
            'engine': 'heuristic',
            'engine_ready': app.config.get('ANALYSIS_SERVICE') is not None
        }), 200

    @app.route('/', methods=['GET'])
    def index():
        """Root endpoint with API information."""
        return jsonify({
            'name': 'CropHealth Monitor API',
            'description': 'Crop photograph health and disease assessment',
            'version': '1.0.0',
            'health': '/health'
        })

    app.logger.info("Blueprints registered")


def register_error_handlers(app):
    """
    Register global error handlers for common HTTP errors.

    Provides consistent JSON error responses across the API.
    """

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({
            'success': False,
            'error': 'Bad Request',
            'message': str(error.description) if hasattr(error, 'description') else 'Invalid request'
        }), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'error': 'Not Found',
            'message': 'The requested resource was not found'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'success': False,
            'error': 'Method Not Allowed',
            'message': 'The method is not allowed for this endpoint'
        }), 405

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({
            'success': False,
            'error': 'File Too Large',
            'message': 'The uploaded file exceeds the maximum allowed size'
        }), 413

    @app.errorhandler(429)
    def rate_limit_exceeded(error):
        return jsonify({
            'success': False,
            'error': 'Rate Limit Exceeded',
            'message': 'Too many requests. Please try again later.'
        }), 429

    @app.errorhandler(500)
    def internal_server_error(error):
        app.logger.error(f"Internal server error: {error}")
        return jsonify({
            'success': False,
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred. Please try again later.'
        }), 500

    app.logger.info("Error handlers registered")


def init_analysis_service(app):
    """
    Create the analysis service at application startup.

    The service is stored in app config so every request shares one
    random source, seeded from ANALYSIS_RANDOM_SEED when set.
    """
    from services.analysis_service import AnalysisService

    seed = app.config.get('ANALYSIS_RANDOM_SEED')
    app.config['ANALYSIS_SERVICE'] = AnalysisService(seed=seed)

    if seed is None:
        app.logger.info("Analysis engine ready")
    else:
        app.logger.info(f"Analysis engine ready (seed={seed})")


# =============================================================================
# Application Entry Point
# =============================================================================

if __name__ == '__main__':
    app = create_app()

    port = int(os.getenv('PORT', 5000))

    app.run(
        host='0.0.0.0',
        port=port,
        debug=app.config['DEBUG']
    )
