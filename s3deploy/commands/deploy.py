from s3deploy import static
from s3deploy import utils
from s3deploy import exception
from s3deploy.deploy import DeployOptions
from s3deploy.logger import log

from s3deploy.commands.base import CmdBase


class CmdDeploy(CmdBase):
    """
    deploy [options] <site_name> [<site_name> ...]

    Upload configured site(s) to S3 and invalidate their CloudFront paths
    """
    names = ['deploy', 'd']

    def addopts(self, parser):
        parser.add_option("-a", "--all", dest="all_sites",
                          action="store_true", default=False,
                          help="deploy every site defined in the config")
        parser.add_option("-n", "--dry-run", dest="dry_run",
                          action="store_true", default=False,
                          help="show what would be uploaded without "
                          "writing anything")
        parser.add_option("-f", "--force", dest="force",
                          action="store_true", default=False,
                          help="upload every file, even unchanged ones")
        parser.add_option("-e", "--environment", dest="environment",
                          action="store", default="default",
                          help="name of the environment being deployed")
        parser.add_option("-s", "--strategy", dest="strategy",
                          action="store", default=None,
                          choices=static.DEPLOYMENT_STRATEGIES,
                          help="override the configured deployment strategy")
        parser.add_option("-w", "--wait", dest="wait_for_invalidation",
                          action="store_true", default=None,
                          help="wait for CloudFront invalidations to finish")
        parser.add_option("-j", "--workers", dest="max_workers",
                          action="callback", type="int", default=None,
                          callback=self._positive_int,
                          help="number of parallel uploads")

    def execute(self, args):
        opts = self.opts
        if opts.all_sites:
            if args:
                self.parser.error("site names can't be used with --all")
            sites = self.cfg.get_sites()
            if not sites:
                raise exception.ConfigError("no sites defined in config")
        else:
            if not args:
                self.parser.error("please specify a <site_name> or --all")
            sites = [self.cfg.get_site(name) for name in args]
        overrides = dict(show_progress=True)
        for setting in ('strategy', 'wait_for_invalidation', 'max_workers'):
            value = getattr(opts, setting)
            if value is not None:
                overrides[setting] = value
        deployer = self.cfg.get_site_deployer(publisher=self.publisher,
                                              **overrides)
        self.catch_ctrl_c(self._cancel_deploy(deployer))
        options = DeployOptions(environment=opts.environment,
                                dry_run=opts.dry_run, force=opts.force,
                                profile=self.profile, region=self.region)
        if len(sites) == 1:
            results = {sites[0].name: deployer.deploy_site(sites[0], options)}
        else:
            results = deployer.deploy_sites(sites, options)
        self.print_summary(results)
        failed = [name for name, r in results.items() if not r.success]
        if failed:
            raise exception.S3DeployError("deployment failed for: %s" %
                                          ', '.join(failed))

    def _cancel_deploy(self, deployer):
        def handler(signum, frame):
            log.warning("Cancelling...")
            deployer.cancel()
            self.cancel_command(signum, frame)
        return handler

    def print_summary(self, results):
        for name, result in results.items():
            if not result.success:
                log.error("%s: %s" % (name, result.error))
                continue
            msg = "%s: %d uploaded, %d unchanged, %s in %ds" % (
                name, result.uploaded_file_count, result.skipped_file_count,
                utils.format_size(result.total_bytes),
                result.duration_seconds)
            if result.version_token:
                msg += " (version %s)" % result.version_token
            if result.invalidation_id:
                msg += " (invalidation %s)" % result.invalidation_id
            log.info(msg)
            if result.invalidation_error:
                log.warning("%s: invalidation failed: %s" %
                            (name, result.invalidation_error))
