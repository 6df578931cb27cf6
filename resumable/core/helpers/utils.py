import logging

LOG_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s'


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
