# --- START OF FILE src/web_ui.py ---

import sys
import logging
import traceback
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from bridge_routes import bridge_bp, init_bridge_routes
from version import get_version_info


def log_request_info(response):
    """Log request details after each request if debug is enabled."""
    from flask import current_app
    current_app.logger.debug(
        f'{request.remote_addr} - "{request.method} {request.path}" '
        f'{response.status_code} {response.content_length}'
    )
    return response


def create_app(bridge, settings=None, debug=False, timeout=None) -> Flask:
    """
    Build the Flask app serving the bridge API.

    Args:
        bridge: ConfigBridge instance the routes delegate to
        settings: SettingsStore for per-request timeouts (default store if None)
        debug: Enable debug-level request logging
        timeout: Seconds to wait per bridge call (stored setting if None)
    """
    app = Flask(__name__)
    app.json.sort_keys = False # Keep order in JSON responses

    app.logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if debug:
        app.after_request(log_request_info)

    init_bridge_routes(bridge, settings, timeout)
    app.register_blueprint(bridge_bp, url_prefix='/api/bridge')

    @app.route('/api/version')
    def version_info():
        """Return version and application information."""
        info = get_version_info()
        info['python_version'] = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
        return jsonify(status="success", **info)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.exception(f"Unexpected error handling {request.path}: {e}")
        return jsonify(status="error", error="An unexpected server error occurred.", details=str(e)), 500

    return app


# --- Main Execution ---
def run_web_ui(bridge, host="127.0.0.1", port=5002, debug=False, settings=None, timeout=None, threads=4):
    """Runs the Flask app using Waitress, with conditional request logging."""
    if bridge is None:
        print("WEB_UI: FATAL - ConfigBridge instance not provided!", file=sys.stderr)
        sys.exit(1)

    app = create_app(bridge, settings=settings, debug=debug, timeout=timeout)

    if debug:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s:%(name)s:%(message)s')
        print(f"WEB_UI: Debug mode enabled. Running Flask development server on http://{host}:{port}", file=sys.stderr)
        app.run(host=host, port=port, debug=True, use_reloader=False)
        return

    logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(message)s')
    try:
        from waitress import serve
        print(f"WEB_UI: Production mode. Running Waitress server on http://{host}:{port}", file=sys.stderr)
        print("WEB_UI: To close, use Ctrl+C.", file=sys.stderr)
        serve(app, host=host, port=port, threads=threads)
    except Exception as e:
        app.logger.exception(f"Error starting Waitress server: {e}")
        print(f"WEB_UI: Error starting Waitress server: {e}\n{traceback.format_exc()}", file=sys.stderr)
        sys.exit(1)

# --- END OF FILE src/web_ui.py ---
