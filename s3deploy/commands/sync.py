from s3deploy import static
from s3deploy import exception
from s3deploy.uploader import Uploader, UploadOptions
from s3deploy.logger import log

from s3deploy.commands.base import CmdBase


class CmdSync(CmdBase):
    """
    sync [options] <bucket_name> <root_directory>

    Upload new and modified files in a local directory to an S3 bucket
    """
    names = ['sync', 's']

    def addopts(self, parser):
        parser.add_option("-V", "--versioned", dest="versioned",
                          action="store_true", default=False,
                          help="upload below a new version prefix")
        parser.add_option("-n", "--dry-run", dest="dry_run",
                          action="store_true", default=False,
                          help="show what would be uploaded without "
                          "writing anything")
        parser.add_option("-f", "--force", dest="force",
                          action="store_true", default=False,
                          help="upload every file, even unchanged ones")
        parser.add_option("-j", "--workers", dest="max_workers",
                          action="callback", type="int", default=1,
                          callback=self._positive_int,
                          help="number of parallel uploads")

    def execute(self, args):
        if len(args) != 2:
            self.parser.error(
                'please specify a <bucket_name> and <root_directory>')
        bucket_name, rootdir = args
        self._check_dir(rootdir)
        strategy = static.DIRECT
        if self.opts.versioned:
            strategy = static.VERSIONED
        options = UploadOptions(
            bucket_name, strategy=strategy, dry_run=self.opts.dry_run,
            region=self.region, profile=self.profile,
            version_prefix=self.cfg.versioning.version_prefix,
            max_workers=self.opts.max_workers, force=self.opts.force,
            show_progress=True)
        log.info("Syncing '%s' with '%s'" % (bucket_name, rootdir))
        s3 = self.s3
        if not options.dry_run and not s3.bucket_exists(bucket_name):
            raise exception.BucketDoesNotExist(bucket_name)
        uploader = Uploader(s3, publisher=self.publisher)
        result = uploader.upload_site(rootdir, bucket_name, options)
        if not result.success:
            raise exception.S3DeployError(result.error)
        if result.version_token:
            log.info("Deployed version: %s" % result.version_token)
        log.info("Successfully synced bucket: %s" % bucket_name)
