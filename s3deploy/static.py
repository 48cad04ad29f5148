"""
Module for storing static data structures
"""
import os
import sys


VERSION = '0.1.0'
PID = os.getpid()

S3DEPLOY_CFG_DIR = os.path.join(os.path.expanduser('~'), '.s3deploy')
S3DEPLOY_CFG_FILE = os.path.join(S3DEPLOY_CFG_DIR, 'config')
S3DEPLOY_LOG_DIR = os.path.join(S3DEPLOY_CFG_DIR, 'logs')
DEBUG_FILE = os.path.join(S3DEPLOY_LOG_DIR, 'debug.log')
AWS_DEBUG_FILE = os.path.join(S3DEPLOY_LOG_DIR, 'aws-debug.log')
CRASH_FILE = os.path.join(S3DEPLOY_LOG_DIR, 'crash-report-%d.txt' % PID)

DEFAULT_REGION = 'us-east-1'

# remote connection behaviour for every boto3 client
AWS_CONNECT_TIMEOUT = 10
AWS_READ_TIMEOUT = 60
AWS_MAX_ATTEMPTS = 3

DIRECT = 'direct'
VERSIONED = 'versioned'
DEPLOYMENT_STRATEGIES = [DIRECT, VERSIONED]
DEFAULT_VERSION_PREFIX = 'v'

INVALIDATION_IN_PROGRESS = 'InProgress'
INVALIDATION_COMPLETED = 'Completed'
INVALIDATION_POLL_INTERVAL = 10
INVALIDATION_MAX_WAIT = 300
DEFAULT_INVALIDATION_PATHS = ['/*']
CALLER_REFERENCE_PREFIX = 's3deploy'

READY_STACK_STATUSES = ['CREATE_COMPLETE', 'UPDATE_COMPLETE']

# stack output names probed in order, first present wins
BUCKET_OUTPUT_KEYS = (
    'BucketName',
    'S3BucketName',
    'WebsiteBucket',
    'StaticSiteBucket',
    'Bucket',
)
DISTRIBUTION_OUTPUT_KEYS = (
    'DistributionId',
    'CloudFrontDistributionId',
    'CDNDistributionId',
    'Distribution',
)

GLOBAL_SETTINGS = {
    # setting, type, required?, default, options, callback
    'deployment_strategy': (str, False, DIRECT, DEPLOYMENT_STRATEGIES, None),
    'enable_remote_deployment': (bool, False, False, None, None),
    'max_workers': (int, False, 1, None, None),
    'include': (list, False, [], None, None),
}

AWS_SETTINGS = {
    'aws_access_key_id': (str, False, None, None, None),
    'aws_secret_access_key': (str, False, None, None, None),
    'aws_session_token': (str, False, None, None, None),
    'aws_profile': (str, False, None, None, None),
    'aws_region_name': (str, False, None, None, None),
}

CLOUDFRONT_SETTINGS = {
    'enable_invalidation': (bool, False, True, None, None),
    'invalidation_paths': (list, False, DEFAULT_INVALIDATION_PATHS, None,
                           None),
    'wait_for_invalidation': (bool, False, False, None, None),
    'max_wait_time': (int, False, INVALIDATION_MAX_WAIT, None, None),
}

VERSIONING_SETTINGS = {
    'version_prefix': (str, False, DEFAULT_VERSION_PREFIX, None, None),
}

SITE_SETTINGS = {
    'local_path': (str, True, None, None, os.path.expanduser),
    'dist_directory': (str, False, 'dist', None, None),
    'bucket_name': (str, False, None, None, None),
    'distribution_id': (str, False, None, None, None),
    'stack_name': (str, False, None, None, None),
    'extends': (str, False, None, None, None),
}


def __expand_all(path):
    path = os.path.expanduser(path)
    path = os.path.expandvars(path)
    return path


def __makedirs(path, exit_on_failure=False):
    if not os.path.exists(path):
        try:
            os.makedirs(path)
        except OSError:
            if exit_on_failure:
                sys.stderr.write("!!! ERROR - %s *must* be a directory\n" %
                                 path)
    elif not os.path.isdir(path) and exit_on_failure:
        sys.stderr.write("!!! ERROR - %s *must* be a directory\n" % path)
        sys.exit(1)


def create_config_dirs():
    __makedirs(S3DEPLOY_CFG_DIR, exit_on_failure=True)
    __makedirs(S3DEPLOY_LOG_DIR)
