#!/usr/bin/env python3
# --- START OF FILE src/main.py ---
import sys
import json
import signal
import argparse
import traceback
from typing import Optional

import constants
from bridge import ConfigBridge
from config_manager import get_default_store, get_float_setting
from debug_logging import set_debug_mode, log_info, log_error
from worker import run_with_timeout


def _signal_handler(signum, frame):
    """Handle termination signals."""
    sig_name = signal.Signals(signum).name if hasattr(signal, 'Signals') else str(signum)
    print(f"\nMAIN: Received {sig_name}, shutting down...", file=sys.stderr)
    sys.stdout.flush()
    sys.stderr.flush()
    sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    class RawDefaultsHelpFormatter(argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter):
        pass

    prog_name = "mora-panel"
    parser = argparse.ArgumentParser(
        prog=prog_name,
        description="MoraPanel root bridge for the mora performance daemon",
        formatter_class=RawDefaultsHelpFormatter,
        epilog=(
            "Examples:\n"
            f"  Check that root access is granted:\n"
            f"    {prog_name} --test-root\n\n"
            f"  Print the daemon API token (provisions one if missing):\n"
            f"    {prog_name} --token\n\n"
            f"  Query the daemon through the root shell:\n"
            f"    {prog_name} --get /api/status\n"
            f"    {prog_name} --post /api/profile --data '{{\"mode\":\"balanced\"}}'\n\n"
            f"  Serve the bridge API for a browser-based panel:\n"
            f"    {prog_name} --web --port 5002\n"
        ),
    )

    action_group = parser.add_argument_group(
        'Actions',
        'One-shot bridge operations. Results are printed to stdout.'
    )
    action_group.add_argument('--test-root', action='store_true', help='Check root access and exit (0 if granted).')
    action_group.add_argument('--token', action='store_true', help='Print the daemon API token.')
    action_group.add_argument('--get', metavar='PATH', help='Send a GET to the daemon and print the JSON result.')
    action_group.add_argument('--post', metavar='PATH', help='Send a POST to the daemon and print the JSON result.')
    action_group.add_argument('--data', metavar='BODY', default='', help='Request body for --post.')
    action_group.add_argument('--show-config', action='store_true', help='Print the selected daemon config.json.')

    web_group = parser.add_argument_group(
        'Web options',
        'Serve the bridge over HTTP for UIs that cannot call it directly.'
    )
    web_group.add_argument('-w', '--web', action='store_true', help='Run the bridge web API.')
    web_group.add_argument('--host', default=constants.DEFAULT_WEB_HOST, help='Host/IP to bind the web API.')
    web_group.add_argument('-p', '--port', default=constants.DEFAULT_WEB_PORT, type=int, help='Port to bind the web API.')

    common_group = parser.add_argument_group('Common options')
    common_group.add_argument('--config-path', metavar='PATH', help='Select (and persist) the daemon config.json path.')
    common_group.add_argument('--timeout', metavar='SECONDS', type=float, default=None,
                              help='Seconds to wait for each bridge call (stored setting if omitted).')
    common_group.add_argument('--no-elevate', action='store_true', help='Run shell commands as the current user.')
    common_group.add_argument('--debug', action='store_true', help='Enable debug mode with verbose logging.')
    return parser


def _call(bridge: ConfigBridge, func_name: str, timeout: float, *args):
    finished, result = run_with_timeout(getattr(bridge, func_name), *args, timeout=timeout)
    if not finished:
        log_error("MAIN", f"'{func_name}' did not finish within {timeout:g}s")
        sys.exit(2)
    return result


def _run_action(bridge: ConfigBridge, args, timeout: float) -> int:
    if args.test_root:
        ok = _call(bridge, 'test_root', timeout)
        print("root: granted" if ok else "root: denied")
        return 0 if ok else 1

    if args.token:
        token = _call(bridge, 'get_api_token', timeout)
        if not token:
            log_error("MAIN", "api_token unavailable (no readable config, write failed)")
            return 1
        print(token)
        return 0

    if args.get or args.post:
        if args.get:
            payload = _call(bridge, 'proxy_get', timeout, args.get)
        else:
            payload = _call(bridge, 'proxy_post', timeout, args.post, args.data)
        print(payload)
        return 0 if json.loads(payload).get('code') else 1

    if args.show_config:
        text = _call(bridge, 'read_config', timeout)
        if not text:
            log_error("MAIN", f"Config not readable at {bridge.get_config_path()}")
            return 1
        print(text)
        return 0

    return -1


def main(argv: Optional[list] = None) -> int:
    signal.signal(signal.SIGTERM, _signal_handler)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        set_debug_mode(True)
    if args.post is None and args.data:
        parser.error("--data requires --post")

    store = get_default_store()
    timeout = args.timeout
    if timeout is None:
        timeout = get_float_setting(store, constants.SETTING_PROXY_TIMEOUT, constants.DEFAULT_PROXY_TIMEOUT)

    try:
        bridge = ConfigBridge.create(store, elevate=False if args.no_elevate else None)
    except Exception as e:
        print(f"MAIN: Failed to set up bridge: {e}\n{traceback.format_exc()}", file=sys.stderr)
        return 1

    if args.config_path:
        bridge.set_config_path(args.config_path)
        log_info("MAIN", f"Config path set to {bridge.get_config_path()}")

    if args.web:
        import web_ui
        web_ui.run_web_ui(bridge, host=args.host, port=args.port, debug=args.debug,
                          settings=store, timeout=args.timeout, threads=constants.WEB_SERVER_THREADS)
        return 0

    exit_code = _run_action(bridge, args, timeout)
    if exit_code >= 0:
        return exit_code

    if args.config_path:
        # Selecting a path on its own is a complete action
        print(bridge.get_config_path())
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())

# --- END OF FILE src/main.py ---
