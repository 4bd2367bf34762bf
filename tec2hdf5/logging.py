import sys
import logging


class LoggingContext(object):

    """
    A context manager that provides the logger for a conversion: either one
    passed in by the caller or a new one writing bare messages to stdout or a
    log file.  Errors that escape the context are logged before they
    propagate.

    Attributes
    ----------
    logger : logging.Logger
        The logger to use inside the context
    """

    def __init__(self, name, logger=None, log_filename=None,
                 level=logging.INFO):
        """
        Parameters
        ----------
        name : str
            The name of the logger to create, e.g. the name of the
            command-line tool

        logger : logging.Logger, optional
            A logger to use as is; nothing is created, redirected or cleaned
            up

        log_filename : str, optional
            A file for the output of a new logger, which also captures
            anything printed to stdout or stderr inside the context.  Output
            goes to stdout if no file is given

        level : int, optional
            The level of a newly created logger; ``logging.DEBUG`` adds the
            sizes of the token streams and other details of a conversion
        """
        self.logger = logger
        self.name = name
        self.log_filename = log_filename
        self.level = level
        self.handler = None
        self.redirected = None
        self.existing_logger = logger is not None

    def __enter__(self):
        if self.existing_logger:
            return self.logger

        logger = logging.getLogger(self.name)
        if self.log_filename is None:
            handler = logging.StreamHandler(sys.stdout)
        else:
            handler = logging.FileHandler(self.log_filename)
        handler.setFormatter(Tec2Hdf5Formatter())
        logger.addHandler(handler)
        logger.setLevel(self.level)
        logger.propagate = False
        self.logger = logger
        self.handler = handler

        if self.log_filename is not None:
            # anything printed during the conversion also goes to the log
            self.redirected = (sys.stdout, sys.stderr)
            sys.stdout = StreamToLogger(logger, logging.INFO)
            sys.stderr = StreamToLogger(logger, logging.ERROR)
        return logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.existing_logger:
            return

        if exc_type is not None:
            self.logger.error(f'{exc_type.__name__}: {exc_val}')

        if self.redirected is not None:
            sys.stdout, sys.stderr = self.redirected
            self.redirected = None

        self.handler.close()
        self.logger.removeHandler(self.handler)


class Tec2Hdf5Formatter(logging.Formatter):
    """
    A formatter that writes bare messages, except at the debug level where
    the module and line number are prepended
    """

    dbg_fmt = 'DEBUG: %(module)s: %(lineno)d: %(message)s'
    info_fmt = '%(message)s'

    def __init__(self):
        super().__init__(Tec2Hdf5Formatter.info_fmt)
        self._debug_formatter = logging.Formatter(Tec2Hdf5Formatter.dbg_fmt)

    def format(self, record):
        if record.levelno <= logging.DEBUG:
            return self._debug_formatter.format(record)
        return super().format(record)


class StreamToLogger(object):
    """
    A file-like stream object that sends each line written to it to a logger

    Modified based on code by:
    https://www.electricmonk.nl/log/2011/08/14/redirect-stdout-and-stderr-to-a-logger-in-python/
    """

    def __init__(self, logger, log_level=logging.INFO):
        self.logger = logger
        self.log_level = log_level

    def write(self, buf):
        for line in buf.rstrip().splitlines():
            self.logger.log(self.log_level, line.rstrip())

    def flush(self):
        pass
