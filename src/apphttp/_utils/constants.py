# Environment variables
ENV_BASE_URL = "APPHTTP_URL"
ENV_ACCESS_TOKEN = "APPHTTP_ACCESS_TOKEN"
ENV_TIMEOUT = "APPHTTP_TIMEOUT"
ENV_MAX_CONNECTIONS = "APPHTTP_MAX_CONNECTIONS"
ENV_DISABLE_SSL_VERIFY = "APPHTTP_DISABLE_SSL_VERIFY"
ENV_SSL_CERT_FILE = "SSL_CERT_FILE"
ENV_SSL_CERT_DIR = "SSL_CERT_DIR"
ENV_REQUESTS_CA_BUNDLE = "REQUESTS_CA_BUNDLE"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"

# Media types
APPLICATION_JSON = "application/json"
FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"
OCTET_STREAM = "application/octet-stream"

DEFAULT_CHARSET = "utf-8"
