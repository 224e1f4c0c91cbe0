"""Environment variable names and npmrc setting keys."""

DEFAULT_NPM_REGISTRY = "registry.npmjs.org"
PUBLIC_NODEJS_URL = "https://nodejs.org/dist"

# Build environment
ENVVAR_NODEJS_HOME = "NODEJS_HOME"
ENVVAR_NODEJS_PATH = "PATH+NODEJS"  # host convention: prepended to PATH
NPM_CACHE_LOCATION = "npm_config_cache"
NPM_USERCONFIG = "npm_config_userconfig"

# npmrc settings
NPM_SETTINGS_ALWAYS_AUTH = "always-auth"
NPM_SETTINGS_REGISTRY = "registry"
NPM_SETTINGS_AUTH = "_auth"
NPM_SETTINGS_AUTHTOKEN = "_authToken"
NPM_SETTINGS_USER = "username"
NPM_SETTINGS_PASSWORD = "_password"
