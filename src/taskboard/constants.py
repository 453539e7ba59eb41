STATE_DIR_NAME = ".taskboard"
CONFIG_FILE = "config.yaml"
DATABASE_FILE = "tasks.db"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"

ENV_DATABASE_URL = "TASKBOARD_DATABASE_URL"
ENV_LOG_LEVEL = "TASKBOARD_LOG_LEVEL"

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
