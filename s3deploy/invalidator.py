"""
CloudFront invalidations for deployed sites
"""
import threading

from s3deploy import utils
from s3deploy import static
from s3deploy import events
from s3deploy import exception
from s3deploy.logger import log


class InvalidationOptions(object):
    def __init__(self, site, wait_for_completion=False,
                 max_wait_time=static.INVALIDATION_MAX_WAIT,
                 poll_interval=static.INVALIDATION_POLL_INTERVAL):
        if poll_interval <= 0:
            raise exception.ConfigError("poll interval must be positive")
        self.site = site
        self.wait_for_completion = wait_for_completion
        self.max_wait_time = max_wait_time or static.INVALIDATION_MAX_WAIT
        self.poll_interval = poll_interval


class InvalidationResult(object):
    def __init__(self, invalidation_id, status, success, error=None):
        self.invalidation_id = invalidation_id
        self.status = status
        self.success = success
        self.error = error

    def __repr__(self):
        return '<InvalidationResult: %s %s>' % (self.invalidation_id or '-',
                                                self.status)

    @property
    def completed(self):
        return self.status == static.INVALIDATION_COMPLETED


class Invalidator(object):
    """
    Creates CloudFront invalidations and optionally waits for them.

    cancel_event is the stop signal for the polling loop: once set, the
    current wait returns immediately and the invalidation is reported as
    still in progress.
    """
    def __init__(self, cf, publisher=None, cancel_event=None):
        self.cf = cf
        self.events = publisher or events.EventPublisher()
        self.cancel_event = cancel_event or threading.Event()

    def cancel(self):
        self.cancel_event.set()

    def invalidate(self, distribution_id, paths, options):
        paths = list(paths or static.DEFAULT_INVALIDATION_PATHS)
        self.events.publish(events.BEFORE_INVALIDATION, site=options.site,
                            distribution_id=distribution_id, paths=paths)
        caller_reference = utils.generate_caller_reference(
            static.CALLER_REFERENCE_PREFIX)
        try:
            invalidation_id = self.cf.create_invalidation(
                distribution_id, paths, caller_reference)
        except exception.AWSError as e:
            log.error("Unable to invalidate %s: %s" % (distribution_id, e))
            self.events.publish(events.AFTER_INVALIDATION, site=options.site,
                                distribution_id=distribution_id,
                                invalidation_id='', success=False)
            return InvalidationResult('', static.INVALIDATION_IN_PROGRESS,
                                      False, error=str(e))
        status = static.INVALIDATION_IN_PROGRESS
        if options.wait_for_completion:
            log.info("Waiting for CloudFront invalidation %s to complete..." %
                     invalidation_id)
            status = self.wait_for_invalidation(distribution_id,
                                                invalidation_id, options)
        self.events.publish(events.AFTER_INVALIDATION, site=options.site,
                            distribution_id=distribution_id,
                            invalidation_id=invalidation_id, success=True)
        return InvalidationResult(invalidation_id, status, True)

    def wait_for_invalidation(self, distribution_id, invalidation_id,
                              options):
        """
        Poll every options.poll_interval seconds for at most
        options.max_wait_time seconds. Returns the last known status.
        """
        interval = options.poll_interval
        max_wait = options.max_wait_time
        max_checks = int(max_wait // interval)
        for check in range(max_checks):
            elapsed = check * interval
            try:
                status = self.cf.get_invalidation_status(distribution_id,
                                                         invalidation_id)
            except exception.AWSError as e:
                log.warning("Failed to check invalidation status: %s" % e)
                status = None
            if status == static.INVALIDATION_COMPLETED:
                log.info("CloudFront invalidation completed")
                return static.INVALIDATION_COMPLETED
            self.events.progress(
                options.site, events.STAGE_INVALIDATING,
                int(round(elapsed * 100.0 / max_wait)),
                "Waiting for CloudFront invalidation (%ds)" % elapsed)
            log.info("CloudFront invalidation status: %s (%ds elapsed)" %
                     (status, elapsed))
            if self.cancel_event.wait(interval):
                log.warning("Stopped waiting for invalidation %s" %
                            invalidation_id)
                return static.INVALIDATION_IN_PROGRESS
        log.info("CloudFront invalidation still in progress after %ds" %
                 max_wait)
        return static.INVALIDATION_IN_PROGRESS
