from irdata.config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Data API configuration
API_BASE = config.get("IRDATA_API_URL", "https://members-ng.iracing.com/data")
# Optional passthrough for externally hosted files (links and chunks),
# e.g. http://localhost/irdata_js/passthrough
FILE_PROXY_URL = config.get("IRDATA_FILE_PROXY_URL", None)

# OAuth configuration
AUTH_BASE_URL = config.get("IRDATA_AUTH_BASE_URL", "https://oauth.iracing.com/oauth2")
# Defaults to {AUTH_BASE_URL}/token when unset
TOKEN_ENDPOINT = config.get("IRDATA_TOKEN_ENDPOINT", None)
CLIENT_ID = config.get("IRDATA_CLIENT_ID", None)
REDIRECT_URI = config.get("IRDATA_REDIRECT_URI", None)
# Required by the iRacing authorization server (not user configurable)
SCOPES = "iracing.auth"

# Timeout configuration
CONNECT_TIMEOUT = config.get("IRDATA_CONNECT_TIMEOUT", 10.0)
REQUEST_TIMEOUT = config.get("IRDATA_REQUEST_TIMEOUT", 120.0)

# Token storage. Tokens are only persisted when a file is configured.
TOKEN_FILE = config.get("IRDATA_TOKEN_FILE", None)
