"""
Bridge Routes - Flask Blueprint exposing the bridge surface over HTTP

Browser-based panel pages call these instead of a native JS interface:
- Root gate check
- Daemon base URL and API token
- Root-proxy GET/POST to the daemon
- Selected config path and raw config text
"""

import json

from flask import Blueprint, current_app, jsonify, request

import constants
from config_manager import get_float_setting, get_default_store
from worker import run_with_timeout

# Create Blueprint
bridge_bp = Blueprint('bridge', __name__)

# Will be set by web_ui.py when registering blueprint
_bridge = None
_settings = None
_timeout_override = None


def init_bridge_routes(bridge, settings=None, timeout=None):
    """
    Initialize the bridge routes with a bridge instance.

    Args:
        bridge: ConfigBridge instance
        settings: SettingsStore for the request timeout (default store if None)
        timeout: Seconds to wait per call, overrides the stored setting
    """
    global _bridge, _settings, _timeout_override
    _bridge = bridge
    _settings = settings
    _timeout_override = timeout


def _call_timeout() -> float:
    if _timeout_override is not None:
        return _timeout_override
    store = _settings if _settings is not None else get_default_store()
    return get_float_setting(store, constants.SETTING_PROXY_TIMEOUT, constants.DEFAULT_PROXY_TIMEOUT)


def _call_bridge(func_name: str, *args):
    """Run a bridge method on a worker thread. Returns (finished, result)."""
    method = getattr(_bridge, func_name)
    return run_with_timeout(method, *args, timeout=_call_timeout())


def _not_initialized():
    return jsonify({'status': 'error', 'error': 'Bridge not initialized'}), 500


def _timed_out(func_name: str):
    current_app.logger.warning(f"Bridge call '{func_name}' timed out waiting for the root shell")
    return jsonify({'status': 'error', 'error': constants.PROXY_ERROR_TIMEOUT}), 504


@bridge_bp.route('/root', methods=['GET'])
def test_root():
    """Check root access (shows the consent prompt on first use)."""
    if not _bridge:
        return _not_initialized()
    finished, ok = _call_bridge('test_root')
    if not finished:
        return _timed_out('test_root')
    return jsonify({'status': 'success', 'root': bool(ok)})


@bridge_bp.route('/base_url', methods=['GET'])
def base_url():
    if not _bridge:
        return _not_initialized()
    return jsonify({'status': 'success', 'base_url': _bridge.get_api_base_url()})


@bridge_bp.route('/token', methods=['GET'])
def api_token():
    """Return the daemon API token; empty string means retry later."""
    if not _bridge:
        return _not_initialized()
    finished, token = _call_bridge('get_api_token')
    if not finished:
        return _timed_out('get_api_token')
    return jsonify({'status': 'success', 'token': token, 'available': bool(token)})


@bridge_bp.route('/config', methods=['GET'])
def read_config():
    if not _bridge:
        return _not_initialized()
    finished, text = _call_bridge('read_config')
    if not finished:
        return _timed_out('read_config')
    return jsonify({'status': 'success', 'path': _bridge.get_config_path(), 'config': text})


@bridge_bp.route('/config_path', methods=['GET', 'POST'])
def config_path():
    if not _bridge:
        return _not_initialized()
    if request.method == 'POST':
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data:
            return jsonify({'status': 'error', 'error': 'No data provided'}), 400
        path = str(data.get('path', '')).strip()
        if not path:
            return jsonify({'status': 'error', 'error': 'Path is required'}), 400
        _bridge.set_config_path(path)
    return jsonify({'status': 'success', 'path': _bridge.get_config_path()})


def _proxy_reply(func_name: str, *args):
    finished, payload = _call_bridge(func_name, *args)
    if not finished:
        current_app.logger.warning(f"Proxy call '{func_name}' timed out")
        payload = json.dumps({'code': 0, 'body': '', 'error': constants.PROXY_ERROR_TIMEOUT})
        return current_app.response_class(payload, status=504, mimetype='application/json')
    # ProxyResponse JSON is passed through verbatim; the page branches on code/error
    return current_app.response_class(payload, status=200, mimetype='application/json')


@bridge_bp.route('/proxy', methods=['GET', 'POST'])
def proxy():
    """
    Relay a request to the mora daemon through the root shell.

    GET  /proxy?path=/api/status
    POST /proxy  {"path": "/api/profile", "body": "{...}"}
    """
    if not _bridge:
        return _not_initialized()

    if request.method == 'GET':
        path = request.args.get('path', '')
        if not path.startswith('/'):
            return jsonify({'status': 'error', 'error': 'path must start with /'}), 400
        return _proxy_reply('proxy_get', path)

    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({'status': 'error', 'error': 'No data provided'}), 400
    path = str(data.get('path', ''))
    if not path.startswith('/'):
        return jsonify({'status': 'error', 'error': 'path must start with /'}), 400
    body = data.get('body', '')
    if not isinstance(body, str):
        body = json.dumps(body)
    return _proxy_reply('proxy_post', path, body)
