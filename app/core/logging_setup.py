import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = "INFO") -> None:
    """Configures root logging once for the service process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # Keep ORM chatter at INFO even when the service runs in DEBUG
    logging.getLogger("tortoise").setLevel(logging.INFO)
