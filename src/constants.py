# --- START OF FILE constants.py ---

"""
Central location for constants used across the bridge modules.
"""

# --- Daemon API ---
API_BASE_URL = "http://127.0.0.1:1004"   # mora daemon listens on loopback only
API_TOKEN_FIELD = "api_token"            # Key inside config.json holding the token
API_KEY_HEADER = "X-Api-Key"
AUTHORIZATION_HEADER = "Authorization"
JSON_CONTENT_TYPE = "application/json"

# --- Token generation ---
TOKEN_BYTES = 32                         # 32 random bytes -> 43 url-safe base64 chars
CONFIG_JSON_INDENT = 2                   # Indentation used when rewriting config.json

# --- HTTP-over-shell framing ---
HTTP_TIMEOUT_SECONDS = 3                 # curl -m, bounds the HTTP leg only
HTTP_STATUS_MARKER = "\n__HTTP__"        # curl -w sentinel separating body and status
PROXY_ERROR_TOKEN_MISSING = "token_missing"
PROXY_ERROR_TIMEOUT = "timeout"

# Ordered client/decoder fallbacks (first success wins, joined with '||')
# Some ROMs lack curl/base64 in root's PATH, Termux and toybox cover those.
CURL_CANDIDATES = [
    "curl",
    "/data/data/com.termux/files/usr/bin/curl",
]
BASE64_DECODERS = [
    "base64 -d",
    "/system/bin/toybox base64 -d",
]

# --- Config write ---
HEREDOC_MARKER = "EOF"                   # Terminator line for the heredoc write fallback

# --- Module discovery ---
MODULE_BRAND = "mora"                    # Case-insensitive substring of the module dir name

# --- Elevation ---
# Probe order for the elevation tool. Android (Magisk/KernelSU) only ships su.
ANDROID_ESCALATION_TOOLS = ["su"]
DESKTOP_ESCALATION_TOOLS = ["pkexec", "sudo", "doas", "su"]
ROOT_UID_OUTPUT = "0"

# --- Settings keys / defaults ---
SETTING_CONFIG_PATH = "config_path"
SETTING_PROXY_TIMEOUT = "proxy_timeout_seconds"
SETTING_ELEVATE = "elevate"
DEFAULT_PROXY_TIMEOUT = 30.0             # Worker wait used by the web layer (seconds)
DEFAULT_ELEVATE = True

# --- Web UI ---
DEFAULT_WEB_HOST = "127.0.0.1"
DEFAULT_WEB_PORT = 5002
WEB_SERVER_THREADS = 4

# --- END OF FILE constants.py ---
