"""Default configuration values for the dhconfig loader.

Defines the baseline behaviour of key resolution, environment selection and
source precedence. These defaults are overridden by ``DHCONFIG_*`` environment
variables and explicit overrides at runtime (see ``settings.load_settings``).
"""

# Default configuration dictionary
DEFAULT_CONFIG = {
    # -------------------------------------------------------------------------
    # Key resolution
    # -------------------------------------------------------------------------
    "DELIMITER": ".",              # Caller-facing separator for nested keys

    # -------------------------------------------------------------------------
    # Environment selection
    # -------------------------------------------------------------------------
    "ENVIRONMENT_VARIABLE": "NODE_ENV",      # Variable naming the deployment profile
    "ENVIRONMENT_NAME_KEY": "environmentName",  # Override key recording the resolved name

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------
    "FILE_EXTENSION": ".json",     # Appended to a config name; ".yaml" / ".yml" also parse
    "FILE_ENCODING": "utf-8",
    "DOTENV_FILE": ".env",         # Read from the config directory when present; "" disables

    # -------------------------------------------------------------------------
    # Volatile sources
    # -------------------------------------------------------------------------
    "ENV_SEPARATOR": "__",         # APP__PORT -> {"APP": {"PORT": ...}}; "" disables nesting
    "PARSE_ARGV_VALUES": True,     # Coerce "3000" / "true" on the command line

    # -------------------------------------------------------------------------
    # Precedence (higher wins)
    # -------------------------------------------------------------------------
    "PRIORITIES": {
        "ARGV": 400,
        "ENV": 300,
        "FILE": 200,               # Ties broken by load order, so later files win
        "OVERRIDES": 100,
    },
}
