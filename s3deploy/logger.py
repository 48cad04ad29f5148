"""
s3deploy logging module
"""
import os
import sys
import logging
import logging.handlers

from s3deploy import static

INFO = logging.INFO
DEBUG = logging.DEBUG
WARN = logging.WARN
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL
FATAL = logging.FATAL

INFO_FORMAT = " ".join(['>>>', "%(message)s\n"])
DEBUG_FORMAT = "%(filename)s:%(lineno)d - %(levelname)s - %(message)s\n"
DEBUG_FORMAT_PID = ("PID: %s " % str(static.PID)) + DEBUG_FORMAT
DEFAULT_CONSOLE_FORMAT = "%(levelname)s - %(message)s\n"
ERROR_CONSOLE_FORMAT = " ".join(['!!!', DEFAULT_CONSOLE_FORMAT])
WARN_CONSOLE_FORMAT = " ".join(['***', DEFAULT_CONSOLE_FORMAT])
FILE_INFO_FORMAT = " ".join(['%(asctime)s', DEFAULT_CONSOLE_FORMAT])


class ConsoleLogger(logging.StreamHandler):

    formatters = {
        INFO: logging.Formatter(INFO_FORMAT),
        DEBUG: logging.Formatter(DEBUG_FORMAT),
        WARN: logging.Formatter(WARN_CONSOLE_FORMAT),
        CRITICAL: logging.Formatter(ERROR_CONSOLE_FORMAT),
        ERROR: logging.Formatter(ERROR_CONSOLE_FORMAT),
    }

    def __init__(self, stream=sys.stdout, error_stream=sys.stderr):
        self.error_stream = error_stream or sys.stderr
        logging.StreamHandler.__init__(self, stream or sys.stdout)

    def format(self, record):
        if hasattr(record, '__raw__'):
            result = record.msg
        else:
            formatter = self.formatters.get(record.levelno, self.formatter)
            result = formatter.format(record)
        return result

    def emit(self, record):
        try:
            msg = self.format(record)
            stream = self.stream
            if record.levelno in [ERROR, CRITICAL]:
                stream = self.error_stream
            if hasattr(record, '__nonewline__'):
                msg = msg.rstrip('\n')
            stream.write(msg)
            self.flush()
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception:
            self.handleError(record)


def get_s3deploy_logger():
    log = logging.getLogger('s3deploy')
    log.addHandler(NullHandler())
    return log


class NullHandler(logging.Handler):
    def emit(self, record):
        pass


log = get_s3deploy_logger()
console = ConsoleLogger()


def configure_s3deploy_logger(filename=static.DEBUG_FILE):
    log.setLevel(DEBUG)
    console.setLevel(INFO)
    log.addHandler(console)
    formatter = logging.Formatter(DEBUG_FORMAT_PID.rstrip())
    static.create_config_dirs()
    try:
        rfh = logging.handlers.RotatingFileHandler(filename,
                                                   maxBytes=1048576,
                                                   backupCount=2)
    except OSError as e:
        log.warning("unable to write debug log %s: %s" % (filename, e))
        return
    rfh.setLevel(DEBUG)
    rfh.setFormatter(formatter)
    log.addHandler(rfh)
    configure_aws_logger()


def configure_aws_logger(filename=static.AWS_DEBUG_FILE):
    """
    Send botocore's debug output to its own file instead of the console
    """
    static.create_config_dirs()
    try:
        handler = logging.handlers.RotatingFileHandler(filename,
                                                       maxBytes=1048576,
                                                       backupCount=2)
    except OSError as e:
        log.warning("unable to write AWS debug log %s: %s" % (filename, e))
        return
    aws_log = logging.getLogger('botocore')
    aws_log.setLevel(DEBUG)
    aws_log.propagate = False
    handler.setLevel(DEBUG)
    handler.setFormatter(logging.Formatter(DEBUG_FORMAT_PID.rstrip()))
    aws_log.addHandler(handler)


def get_log_for_pid(pid, filename=static.DEBUG_FILE):
    if not os.path.isfile(filename):
        return ''
    with open(filename) as fp:
        lines = fp.readlines()
    prefix = 'PID: %s ' % pid
    return ''.join([line.replace(prefix, '', 1) for line in lines
                    if line.startswith(prefix)])
