import os


class Config:
    """
    Configuration class for environment variables and default settings.
    """

    # Path to the YAML file holding targets and the ping policy (the -c flag wins)
    CONFIG_FILE = os.environ.get("TCPING_CONFIG_FILE", "")

    LISTEN_ADDRESS = os.environ.get("TCPING_LISTEN_ADDRESS", "0.0.0.0")
    LISTEN_PORT = int(os.environ.get("TCPING_LISTEN_PORT", "9379"))
    TELEMETRY_PATH = os.environ.get("TCPING_TELEMETRY_PATH", "/metrics")

    # When true, a config error during a scrape terminates the whole process
    CONFIG_ERRORS_FATAL = os.environ.get(
        "TCPING_CONFIG_ERRORS_FATAL", "true"
    ).lower() in ("1", "true", "yes", "on")
