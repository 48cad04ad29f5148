import os
import sys
import signal

from s3deploy import events
from s3deploy.logger import log


class CmdBase(object):
    """
    Base class for s3deploy commands

    Each command consists of a class, which has the following properties:

    - Must have a class member 'names' which is a list of the names for
    the command

    - Can optionally define an addopts(self, parser) method which adds options
    to the given parser. This defines the command's options.
    """
    parser = None
    opts = None
    gopts = None
    gparser = None
    subcmds_map = None
    _publisher = None

    @property
    def goptions_dict(self):
        """
        Returns global options dictionary
        """
        return dict(self.gopts.__dict__)

    @property
    def log(self):
        return log

    @property
    def cfg(self):
        """
        Get global S3DeployConfig object
        """
        return self.goptions_dict.get('CONFIG')

    @property
    def profile(self):
        return self.goptions_dict.get('PROFILE')

    @property
    def region(self):
        return self.goptions_dict.get('REGION')

    @property
    def publisher(self):
        if not self._publisher:
            self._publisher = events.EventPublisher()
            self._publisher.subscribe(self._log_event)
        return self._publisher

    def _log_event(self, event):
        log.debug("event %s: %s" % (event.event_type, event.payload))

    @property
    def s3(self):
        return self.cfg.get_easy_s3(profile=self.profile, region=self.region)

    @property
    def cf(self):
        return self.cfg.get_easy_cf(profile=self.profile, region=self.region)

    def addopts(self, parser):
        pass

    def cancel_command(self, signum, frame):
        """
        Exits program with return value of 1
        """
        print()
        log.info("Exiting...")
        sys.exit(1)

    def catch_ctrl_c(self, handler=None):
        """
        Catch ctrl-c interrupt
        """
        handler = handler or self.cancel_command
        signal.signal(signal.SIGINT, handler)

    def _positive_int(self, option, opt_str, value, parser):
        if value <= 0:
            parser.error("option %s must be a positive integer" % opt_str)
        setattr(parser.values, option.dest, value)

    def _check_dir(self, path):
        if not os.path.isdir(path):
            self.parser.error("'%s' is not a directory" % path)
        return path
