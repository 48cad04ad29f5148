from s3deploy import static
from s3deploy import exception
from s3deploy.invalidator import Invalidator, InvalidationOptions
from s3deploy.logger import log

from s3deploy.commands.base import CmdBase


class CmdInvalidate(CmdBase):
    """
    invalidate [options] <distribution_id> [<path> ...]

    Invalidate paths (default: /*) in a CloudFront distribution
    """
    names = ['invalidate', 'inv']

    def addopts(self, parser):
        parser.add_option("-w", "--wait", dest="wait", action="store_true",
                          default=False,
                          help="wait for the invalidation to complete")
        parser.add_option("-t", "--max-wait", dest="max_wait_time",
                          action="callback", type="int",
                          default=static.INVALIDATION_MAX_WAIT,
                          callback=self._positive_int,
                          help="seconds to wait for completion "
                          "(default: %default)")

    def execute(self, args):
        if not args:
            self.parser.error("please specify a <distribution_id>")
        distribution_id = args[0]
        paths = args[1:] or self.cfg.cloudfront.invalidation_paths
        invalidator = Invalidator(self.cf, publisher=self.publisher)
        self.catch_ctrl_c(lambda signum, frame: invalidator.cancel())
        options = InvalidationOptions(distribution_id,
                                      wait_for_completion=self.opts.wait,
                                      max_wait_time=self.opts.max_wait_time)
        result = invalidator.invalidate(distribution_id, paths, options)
        if not result.success:
            raise exception.InvalidationCreateFailed(distribution_id,
                                                     result.error)
        log.info("Invalidation %s: %s" % (result.invalidation_id,
                                          result.status))
