import logging

import pytest

from s3deploy import static
from s3deploy import logger


@pytest.fixture
def config_dirs(tmp_path, monkeypatch):
    monkeypatch.setattr(static, 'S3DEPLOY_CFG_DIR', str(tmp_path / 'cfg'))
    monkeypatch.setattr(static, 'S3DEPLOY_LOG_DIR',
                        str(tmp_path / 'cfg' / 'logs'))
    return tmp_path


@pytest.fixture
def restore_loggers():
    s3deploy_handlers = list(logger.log.handlers)
    s3deploy_level = logger.log.level
    botocore = logging.getLogger('botocore')
    botocore_state = (list(botocore.handlers), botocore.level,
                      botocore.propagate)
    yield
    for handler in logger.log.handlers[:]:
        if handler not in s3deploy_handlers:
            logger.log.removeHandler(handler)
            if handler is not logger.console:
                handler.close()
    logger.log.setLevel(s3deploy_level)
    for handler in botocore.handlers[:]:
        if handler not in botocore_state[0]:
            botocore.removeHandler(handler)
            handler.close()
    botocore.setLevel(botocore_state[1])
    botocore.propagate = botocore_state[2]


def test_unwritable_aws_log_is_skipped(config_dirs, restore_loggers,
                                       caplog):
    botocore = logging.getLogger('botocore')
    handlers = list(botocore.handlers)
    logger.configure_aws_logger(str(config_dirs / 'missing' / 'aws.log'))
    assert botocore.handlers == handlers
    assert 'unable to write AWS debug log' in caplog.text


def test_aws_log_goes_to_file(config_dirs, restore_loggers):
    path = config_dirs / 'aws.log'
    logger.configure_aws_logger(str(path))
    botocore = logging.getLogger('botocore')
    assert botocore.propagate is False
    botocore.debug('signing request')
    for handler in botocore.handlers:
        handler.flush()
    assert 'signing request' in path.read_text()


def test_unwritable_debug_log_keeps_console(config_dirs, restore_loggers):
    logger.configure_s3deploy_logger(
        str(config_dirs / 'missing' / 'debug.log'))
    assert logger.console in logger.log.handlers


def test_log_for_pid(tmp_path):
    path = tmp_path / 'debug.log'
    path.write_text('PID: 1 a.py:1 - INFO - one\n'
                    'PID: 2 a.py:2 - INFO - two\n'
                    'PID: 1 a.py:3 - INFO - three\n')
    assert logger.get_log_for_pid(1, str(path)) == \
        'a.py:1 - INFO - one\na.py:3 - INFO - three\n'
    assert logger.get_log_for_pid(1, str(tmp_path / 'none.log')) == ''
