"""
s3deploy command line interface

s3deploy [global-opts] action [action-opts] [<action-args> ...]
"""
import sys
import optparse
import traceback

from s3deploy import config
from s3deploy import static
from s3deploy import logger
from s3deploy import commands
from s3deploy import exception
from s3deploy.logger import log, console

__description__ = """
s3deploy - static site deployment to S3 and CloudFront
"""


class S3DeployCLI(object):
    """
    s3deploy Command Line Interface
    """
    def __init__(self):
        self._gparser = None
        self.subcmds_map = {}

    @property
    def gparser(self):
        if not self._gparser:
            self._gparser = self.create_global_parser()
        return self._gparser

    def parse_subcommands(self, gparser, subcmds):
        """
        Parse given global arguments, find subcommand from given list of
        subcommand objects, parse local arguments and return a tuple of
        global options, selected command object, command options, and
        command arguments.
        """
        gopts, args = gparser.parse_args()
        if not args:
            gparser.print_help()
            raise SystemExit("\nError: you must specify an action.")
        subcmdname, subargs = args[0], args[1:]
        if subcmdname not in self.subcmds_map:
            raise SystemExit("Error: no such command: %s" % subcmdname)
        sc = self.subcmds_map[subcmdname]
        lparser = optparse.OptionParser(sc.__doc__.strip())
        sc.gparser = gparser
        sc.parser = lparser
        sc.gopts = gopts
        sc.subcmds_map = self.subcmds_map
        sc.addopts(lparser)
        sc.opts, subsubargs = lparser.parse_args(subargs)
        return gopts, sc, sc.opts, subsubargs

    def create_global_parser(self):
        gparser = optparse.OptionParser(__doc__.strip(),
                                        version=static.VERSION)
        gparser.disable_interspersed_args()
        gparser.add_option("-d", "--debug", dest="DEBUG",
                           action="store_true", default=False,
                           help="print debug messages (useful for "
                           "diagnosing problems)")
        gparser.add_option("-c", "--config", dest="CONFIG", action="store",
                           metavar="FILE",
                           help="use alternate config file (default: %s)" %
                           static.S3DEPLOY_CFG_FILE)
        gparser.add_option("-p", "--profile", dest="PROFILE", action="store",
                           metavar="PROFILE",
                           help="AWS profile to use for this command")
        gparser.add_option("-r", "--region", dest="REGION", action="store",
                           help="specify a region to use (default: "
                           "us-east-1)")
        return gparser

    def __write_module_version(self, modname, fp):
        """
        Write module version information to a file
        """
        try:
            mod = __import__(modname)
            fp.write("%s: %s\n" % (mod.__name__, getattr(mod, '__version__',
                                                         'unknown')))
        except Exception as e:
            print("error getting version for '%s' module: %s" % (modname, e))

    def bug_found(self):
        """
        Builds a crash-report when s3deploy encounters an unhandled
        exception. Report includes system info, python version, dependency
        versions, and a full debug log and stack-trace of the crash.
        """
        dashes = '-' * 10
        header = dashes + ' %s ' + dashes + '\n'
        crashfile = open(static.CRASH_FILE, 'w')
        crashfile.write(header % "CRASH DETAILS")
        crashfile.write(traceback.format_exc())
        crashfile.write(header % "SYSTEM INFO")
        crashfile.write("s3deploy: %s\n" % static.VERSION)
        crashfile.write("Python: %s\n" % sys.version.replace('\n', ' '))
        crashfile.write("Platform: %s\n" % sys.platform)
        dependencies = ['boto3', 'botocore', 'progressbar']
        for dep in dependencies:
            self.__write_module_version(dep, crashfile)
        crashfile.write("\n" + header % "CRASH LOG")
        crashfile.write(logger.get_log_for_pid(static.PID))
        crashfile.close()
        print()
        log.error("Oops! Looks like you've found a bug in s3deploy")
        log.error("Crash report written to: %s" % static.CRASH_FILE)
        log.error("Please include the crash report when filing an issue")
        sys.exit(1)

    def handle_config_not_found(self, e):
        log.error(e.msg)
        if sys.stdin.isatty():
            e.display_options()
        sys.exit(1)

    def main(self):
        """
        s3deploy main
        """
        subcmds = commands.all_cmds
        for sc in subcmds:
            for name in sc.names:
                self.subcmds_map[name] = sc
        gparser = self.gparser
        gopts, sc, opts, args = self.parse_subcommands(gparser, subcmds)
        if gopts.DEBUG:
            console.setLevel(logger.DEBUG)
        try:
            cfg = config.S3DeployConfig(gopts.CONFIG).load()
        except exception.ConfigNotFound as e:
            if sc.names[0] != 'help':
                self.handle_config_not_found(e)
            cfg = None
        except exception.ConfigError as e:
            log.error(e.explain())
            sys.exit(1)
        gopts.CONFIG = cfg
        try:
            sc.execute(args)
        except exception.BaseException as e:
            log.error(e.explain())
            sys.exit(1)
        except KeyboardInterrupt:
            print()
            log.info("Exiting...")
            sys.exit(1)
        except SystemExit:
            # re-raise SystemExit to avoid the bug-catcher below
            raise
        except Exception:
            log.error("Unhandled exception occured", exc_info=True)
            self.bug_found()


def main():
    logger.configure_s3deploy_logger()
    S3DeployCLI().main()


if __name__ == '__main__':
    main()
