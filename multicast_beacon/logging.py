import logging.handlers
from typing import Any

from rich.logging import RichHandler

from multicast_beacon import constants


class Logger:
    def __init__(self, verbose: bool = False, name: str = constants.LOGGER_NAME):
        self.verbose = verbose
        self._logger = logging.getLogger(name)

    @classmethod
    def configure(
        cls,
        foreground: bool,
        logfile: str | None,
        verbose: bool,
        syslog: bool = False,
    ) -> "Logger":
        logger = logging.getLogger(constants.LOGGER_NAME)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        if syslog:
            syslog_handler = logging.handlers.SysLogHandler()
            syslog_handler.setFormatter(
                logging.Formatter(
                    fmt="%(name)s[%(process)d] %(levelname)s: %(message)s"
                )
            )
            logger.addHandler(syslog_handler)

        if foreground:
            stream_handler = RichHandler(show_path=False, log_time_format="%b-%d %H:%M:%S")
            stream_handler.setFormatter(logging.Formatter(fmt="%(message)s"))
            logger.addHandler(stream_handler)

        if logfile:
            file_handler = logging.FileHandler(logfile)
            file_handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s %(name)s %(levelname)s: %(message)s",
                    datefmt="%b-%d %H:%M:%S",
                )
            )
            logger.addHandler(file_handler)

        if verbose:
            logger.setLevel(logging.DEBUG)
        else:
            logger.setLevel(logging.WARNING)

        return cls(verbose=verbose)

    def debug(self, *args: Any, **kwargs: Any):
        self._logger.debug(*args, **kwargs)

    def info(self, *args: Any, **kwargs: Any):
        self._logger.info(*args, **kwargs)

    def warning(self, *args: Any, **kwargs: Any):
        self._logger.warning(*args, **kwargs)
