import os

from s3deploy.templates import config
from s3deploy.logger import log


class BaseException(Exception):
    def __init__(self, *args):
        self.args = args
        self.msg = args[0]

    def __str__(self):
        return self.msg

    def explain(self):
        return "%s: %s" % (self.__class__.__name__, self.msg)


class ConfigError(BaseException):
    """Base class for all config related errors"""


class ConfigNotFound(ConfigError):
    def __init__(self, *args):
        self.args = args
        self.msg = args[0]
        self.cfg = args[1]
        self.template = config.copy_paste_template

    def create_config(self):
        cfg_parent_dir = os.path.dirname(self.cfg)
        if not os.path.exists(cfg_parent_dir):
            os.makedirs(cfg_parent_dir)
        with open(self.cfg, 'w') as cfg_file:
            cfg_file.write(config.config_template)
        log.info("Config template written to %s" % self.cfg)
        log.info("Please customize the config template")

    def display_options(self):
        print('Options:')
        print('--------')
        print('[1] Show the s3deploy config template')
        print('[2] Write config template to %s' % self.cfg)
        print('[q] Quit')
        resp = input('\nPlease enter your selection: ')
        if resp == '1':
            print(self.template)
        elif resp == '2':
            print()
            self.create_config()


class ConfigSectionMissing(ConfigError):
    pass


class ConfigHasNoSections(ConfigError):
    def __init__(self, cfg_file):
        self.args = (cfg_file,)
        self.msg = "No valid sections defined in config file %s" % cfg_file


class S3DeployError(BaseException):
    """Base exception for all deployment related errors"""
    pass


class SiteDoesNotExist(S3DeployError):
    def __init__(self, site_name):
        self.args = (site_name,)
        self.msg = "site '%s' is not defined in the config" % site_name


class DistDirectoryNotFound(S3DeployError):
    def __init__(self, dist_path):
        self.args = (dist_path,)
        self.dist_path = dist_path
        self.msg = "distribution directory not found: %s\n" % dist_path
        self.msg += "(build the site first or check the dist_directory "
        self.msg += "setting)"


class InvalidFileName(S3DeployError):
    def __init__(self, path):
        self.args = (path,)
        self.path = path
        self.msg = "file name is not valid UTF-8 and can't be used as an "
        self.msg += "S3 key: %r" % path


class BucketNotConfigured(S3DeployError):
    def __init__(self, site_name):
        self.args = (site_name,)
        self.msg = "bucket name not specified for site '%s'. " % site_name
        self.msg += "Set bucket_name or enable remote deployment with a "
        self.msg += "stack_name."


class BucketOutputNotFound(S3DeployError):
    def __init__(self, stack_name, candidates):
        self.args = (stack_name, candidates)
        self.msg = "S3 bucket name not found in outputs of stack '%s'. " % \
            stack_name
        self.msg += "Expected one of: %s" % ', '.join(candidates)


class StackNotReady(S3DeployError):
    def __init__(self, stack_name, status):
        self.args = (stack_name, status)
        self.status = status
        self.msg = "stack '%s' is not ready for deployment (status: %s)" % \
            (stack_name, status)


class StackInspectionFailed(S3DeployError):
    def __init__(self, stack_name, error, recommendations=None):
        self.args = (stack_name, error)
        self.recommendations = recommendations or []
        self.msg = "stack inspection failed for '%s': %s" % (stack_name,
                                                              error)
        for rec in self.recommendations:
            self.msg += "\n  - %s" % rec


class AWSError(BaseException):
    """Base exception for all AWS related errors"""


class ClientInitFailed(AWSError):
    def __init__(self, service, error):
        self.args = (service, error)
        self.msg = "unable to initialize %s client: %s" % (service, error)


class RemoteCallFailed(AWSError):
    def __init__(self, operation, error, error_code=None):
        self.args = (operation, error)
        self.operation = operation
        self.error_code = error_code
        self.msg = "%s failed: %s" % (operation, error)


class InvalidationCreateFailed(AWSError):
    def __init__(self, distribution_id, error):
        self.args = (distribution_id, error)
        self.msg = "failed to create invalidation for distribution '%s': " \
            "%s" % (distribution_id, error)


class BucketDoesNotExist(AWSError):
    def __init__(self, bucket_name):
        self.args = (bucket_name,)
        self.msg = "bucket '%s' does not exist" % bucket_name

