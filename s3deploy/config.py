import io
import os
import urllib.request
import configparser

from s3deploy import utils
from s3deploy import events
from s3deploy import static
from s3deploy import awsutils
from s3deploy import exception
from s3deploy.deploy import Site, SiteDeployer, DeploySettings
from s3deploy.stackinspector import StackInspector
from s3deploy.logger import log

DEBUG_CONFIG = False


def get_config(config_file=None):
    """Factory for S3DeployConfig object"""
    return S3DeployConfig(config_file).load()


class S3DeployConfig(object):
    """
    s3deploy Config Parser

    cfg = S3DeployConfig('/path/to/my/config.cfg').load()
    """
    global_settings = static.GLOBAL_SETTINGS
    aws_settings = static.AWS_SETTINGS
    cloudfront_settings = static.CLOUDFRONT_SETTINGS
    versioning_settings = static.VERSIONING_SETTINGS
    site_settings = static.SITE_SETTINGS

    def __init__(self, config_file=None):
        self.cfg_file = config_file or os.environ.get('S3DEPLOY_CONFIG') or \
            static.S3DEPLOY_CFG_FILE
        self.cfg_file = os.path.expanduser(self.cfg_file)
        self.cfg_file = os.path.expandvars(self.cfg_file)
        self.type_validators = {
            int: self._get_int,
            str: self._get_string,
            bool: self._get_bool,
            list: self._get_list,
        }
        self._config = None
        self.globals = utils.AttributeDict()
        self.aws = utils.AttributeDict()
        self.cloudfront = utils.AttributeDict()
        self.versioning = utils.AttributeDict()
        self.sites = utils.AttributeDict()

    def __repr__(self):
        return "<S3DeployConfig: %s>" % self.cfg_file

    def _get_urlfp(self, url):
        log.debug("Loading url: %s" % url)
        try:
            with urllib.request.urlopen(url) as resp:
                fp = io.StringIO(resp.read().decode('utf-8'))
            fp.name = url
            return fp
        except (IOError, ValueError) as e:
            raise exception.ConfigError(
                "error loading config from url %s\n%s" % (url, e))

    def _get_fp(self, cfg_file):
        log.debug("Loading file: %s" % cfg_file)
        if os.path.exists(cfg_file):
            if not os.path.isfile(cfg_file):
                raise exception.ConfigError(
                    'config %s exists but is not a regular file' % cfg_file)
        else:
            raise exception.ConfigNotFound("config file %s does not exist\n" %
                                           cfg_file, cfg_file)
        return open(cfg_file)

    def _get_cfg_fp(self, cfg_file=None):
        cfg = cfg_file or self.cfg_file
        if utils.is_url(cfg):
            return self._get_urlfp(cfg)
        else:
            return self._get_fp(cfg)

    def _get_bool(self, config, section, option):
        try:
            opt = config.getboolean(section, option)
            return opt
        except configparser.NoSectionError:
            pass
        except configparser.NoOptionError:
            pass
        except ValueError:
            raise exception.ConfigError(
                "Expected True/False value for setting %s in section [%s]" %
                (option, section))

    def _get_int(self, config, section, option):
        try:
            opt = config.getint(section, option)
            return opt
        except configparser.NoSectionError:
            pass
        except configparser.NoOptionError:
            pass
        except ValueError:
            raise exception.ConfigError(
                "Expected integer value for setting %s in section [%s]" %
                (option, section))

    def _get_string(self, config, section, option):
        try:
            opt = config.get(section, option)
            return opt
        except configparser.NoSectionError:
            pass
        except configparser.NoOptionError:
            pass

    def _get_list(self, config, section, option):
        val = self._get_string(config, section, option)
        if val:
            val = [v.strip() for v in val.split(',') if v.strip()]
        return val

    def _new_parser(self):
        return configparser.ConfigParser(interpolation=None, strict=False)

    def __load_config(self):
        """
        Populates self._config with a new ConfigParser instance
        """
        try:
            with self._get_cfg_fp() as cfg:
                name = cfg.name
                contents = cfg.read()
            cp = self._new_parser()
            cp.read_string(contents, source=name)
            self._config = cp
            try:
                self.globals = self._load_section('global',
                                                  self.global_settings)
                includes = self.globals.get('include')
                if not includes:
                    return cp
                mashup = io.StringIO()
                mashup.write(contents + '\n')
                for include in includes:
                    include = os.path.expanduser(include)
                    include = os.path.expandvars(include)
                    try:
                        with self._get_cfg_fp(include) as fp:
                            mashup.write(fp.read() + '\n')
                    except exception.ConfigNotFound:
                        raise exception.ConfigError("include %s not found" %
                                                    include)
                cp = self._new_parser()
                cp.read_string(mashup.getvalue(), source=name)
                self._config = cp
            except exception.ConfigSectionMissing:
                pass
            return cp
        except configparser.MissingSectionHeaderError:
            raise exception.ConfigHasNoSections(self.cfg_file)
        except configparser.Error as e:
            raise exception.ConfigError(str(e))

    @property
    def config(self):
        if self._config is None:
            self._config = self.__load_config()
        return self._config

    def _load_settings(self, section_name, settings, store,
                       filter_settings=True):
        """
        Load section settings into a dictionary
        """
        if not self.config.has_section(section_name):
            raise exception.ConfigSectionMissing(
                'Missing section %s in config' % section_name)
        store.update(self.config.items(section_name))
        section_conf = store
        for setting in settings:
            requirements = settings[setting]
            func, required, default, options, callback = requirements
            func = self.type_validators.get(func)
            value = func(self.config, section_name, setting)
            if value is not None:
                if options and value not in options:
                    raise exception.ConfigError(
                        '"%s" setting in section "%s" must be one of: %s' %
                        (setting, section_name,
                         ', '.join([str(o) for o in options])))
                if callback:
                    value = callback(value)
                section_conf[setting] = value
        if filter_settings:
            for key in list(store.keys()):
                if key not in settings:
                    store.pop(key)
        store['__name__'] = section_name

    def _check_required(self, section_name, settings, store):
        """
        Check that all required settings were specified in the config.
        Raises ConfigError otherwise.

        Note that if a setting specified has required=True and
        default is not None then this method will not raise an error
        because a default was given. In short, if a setting is required
        you must provide None as the 'default' value.
        """
        section_conf = store
        for setting in settings:
            requirements = settings[setting]
            required = requirements[1]
            value = section_conf.get(setting)
            if value is None and required:
                raise exception.ConfigError(
                    'missing required option %s in section "%s"' %
                    (setting, section_name))

    def _load_defaults(self, settings, store):
        """
        Sets the default for each setting in settings regardless of whether
        the setting was specified in the config or not.
        """
        section_conf = store
        for setting in settings:
            default = settings[setting][2]
            if section_conf.get(setting) is None:
                if DEBUG_CONFIG:
                    log.debug('%s setting not specified. Defaulting to %s' %
                              (setting, default))
                section_conf[setting] = default

    def _load_extends_settings(self, section_name, store):
        """
        Loads all settings from other site(s) specified by a section's
        'extends' setting.

        This method walks a dependency tree of sections from bottom up. Each
        step is a group of settings for a section in the form of a dictionary.
        A 'master' dictionary is updated with the settings at each step. This
        causes the next group of settings to override the previous, and so on.
        The 'section_name' settings are at the top of the dependency tree.
        """
        section = store[section_name]
        extends = section.get('extends')
        if extends is None:
            return
        if DEBUG_CONFIG:
            log.debug('%s extends %s' % (section_name, extends))
        extensions = [section]
        while True:
            extends = section.get('extends', None)
            if not extends:
                break
            try:
                section = store[extends]
                if section in extensions:
                    exts = ', '.join([self._get_section_name(x['__name__'])
                                      for x in extensions])
                    raise exception.ConfigError(
                        "Cyclical dependency between sections %s. "
                        "Check your EXTENDS settings." % exts)
                extensions.insert(0, section)
            except KeyError:
                raise exception.ConfigError(
                    "%s can't extend non-existent section %s" %
                    (section_name, extends))
        transform = utils.AttributeDict()
        for extension in extensions:
            transform.update(extension)
        store[section_name] = transform

    def _load_section(self, section_name, section_settings,
                      filter_settings=True):
        """
        Returns a dictionary containing all section_settings for a given
        section_name by first loading the settings in the config, loading
        the defaults for all settings not specified, and then checking
        that all required options have been specified
        """
        store = utils.AttributeDict()
        self._load_settings(section_name, section_settings, store,
                            filter_settings)
        self._load_defaults(section_settings, store)
        self._check_required(section_name, section_settings, store)
        return store

    def _load_optional_section(self, section_name, section_settings):
        """
        Same as _load_section but falls back to the defaults when
        section_name is missing
        """
        try:
            return self._load_section(section_name, section_settings)
        except exception.ConfigSectionMissing:
            store = utils.AttributeDict()
            self._load_defaults(section_settings, store)
            return store

    def _get_section_name(self, section):
        """
        Returns section name minus prefix
        e.g.
        $ print(self._get_section_name('site docs'))
        $ docs
        """
        return section.split()[1]

    def _get_sections(self, section_prefix):
        """
        Returns all sections starting with section_prefix
        e.g.
        $ print(self._get_sections('site'))
        $ ['site docs', 'site web', ..]
        """
        return [s for s in self.config.sections() if
                s.split()[0] == section_prefix and len(s.split()) == 2]

    def _load_site_sections(self, site_sections):
        """
        Loads all site sections. Settings are loaded first for every site so
        that 'extends' can be resolved before defaults are applied.
        """
        site_store = utils.AttributeDict()
        for sec in site_sections:
            name = self._get_section_name(sec)
            site_store[name] = utils.AttributeDict()
            self._load_settings(sec, self.site_settings, site_store[name])
        for sec in site_sections:
            name = self._get_section_name(sec)
            self._load_extends_settings(name, site_store)
            site_store[name]['__name__'] = sec
            self._load_defaults(self.site_settings, site_store[name])
            self._check_required(sec, self.site_settings, site_store[name])
        return site_store

    def load(self):
        """
        Populate this config object from the s3deploy config
        """
        log.debug('Loading config')
        self.globals = self._load_optional_section('global',
                                                   self.global_settings)
        try:
            self.aws = self._load_section('aws info', self.aws_settings)
        except exception.ConfigSectionMissing:
            log.debug("no [aws info] section found in config")
            self.aws = utils.AttributeDict()
            self._load_defaults(self.aws_settings, self.aws)
        self.cloudfront = self._load_optional_section(
            'cloudfront', self.cloudfront_settings)
        self.versioning = self._load_optional_section(
            'versioning', self.versioning_settings)
        self.sites = self._load_site_sections(self._get_sections('site'))
        return self

    def get_aws_from_environ(self):
        """
        Returns AWS credentials defined in the user's shell
        environment.
        """
        awscreds = {}
        for key in static.AWS_SETTINGS:
            if key.upper() in os.environ:
                awscreds[key] = os.environ.get(key.upper())
            elif key in os.environ:
                awscreds[key] = os.environ.get(key)
        return awscreds

    def get_aws_credentials(self, profile=None, region=None):
        """
        Returns AWS credentials defined in the configuration
        file. Defining any of the AWS settings in the environment
        overrides the configuration file and explicit profile/region
        arguments override both.
        """
        creds = dict((k, v) for k, v in self.aws.items()
                     if k in self.aws_settings)
        creds.update(self.get_aws_from_environ())
        if profile:
            creds.update(aws_profile=profile, aws_access_key_id=None,
                         aws_secret_access_key=None, aws_session_token=None)
        if region:
            creds['aws_region_name'] = region
        return creds

    def get_easy_s3(self, profile=None, region=None):
        """
        Factory for EasyS3 class that attempts to load AWS credentials from
        the s3deploy config file. Returns an EasyS3 object if successful.
        """
        return awsutils.EasyS3(**self.get_aws_credentials(profile, region))

    def get_easy_cf(self, profile=None, region=None):
        """
        Factory for EasyCF class that attempts to load AWS credentials from
        the s3deploy config file. Returns an EasyCF object if successful.
        """
        return awsutils.EasyCF(**self.get_aws_credentials(profile, region))

    def get_easy_cfn(self, profile=None, region=None):
        return awsutils.EasyCFN(**self.get_aws_credentials(profile, region))

    def get_sites(self):
        return [Site.from_config(name, self.sites[name])
                for name in sorted(self.sites)]

    def get_site(self, name):
        if name not in self.sites:
            raise exception.SiteDoesNotExist(name)
        return Site.from_config(name, self.sites[name])

    def get_deploy_settings(self, **overrides):
        settings = dict(
            strategy=self.globals.deployment_strategy,
            enable_remote_deployment=self.globals.enable_remote_deployment,
            max_workers=self.globals.max_workers,
            default_profile=self.aws.get('aws_profile'),
            default_region=self.aws.get('aws_region_name'),
            enable_invalidation=self.cloudfront.enable_invalidation,
            invalidation_paths=self.cloudfront.invalidation_paths,
            wait_for_invalidation=self.cloudfront.wait_for_invalidation,
            max_wait_time=self.cloudfront.max_wait_time,
            version_prefix=self.versioning.version_prefix)
        settings.update(overrides)
        return DeploySettings(**settings)

    def get_site_deployer(self, publisher=None, **overrides):
        settings = self.get_deploy_settings(**overrides)
        publisher = publisher or events.EventPublisher()
        inspector = None
        if settings.enable_remote_deployment:
            inspector = StackInspector(
                lambda profile, region: self.get_easy_cfn(profile, region),
                publisher=publisher)
        return SiteDeployer(
            lambda profile, region: self.get_easy_s3(profile, region),
            lambda profile, region: self.get_easy_cf(profile, region),
            stack_inspector=inspector, settings=settings,
            publisher=publisher)
