"""
Site deployment: resolve the target bucket, upload, invalidate
"""
import os
import time
import threading

from s3deploy import static
from s3deploy import events
from s3deploy import exception
from s3deploy.uploader import Uploader, UploadOptions, DeploymentResult
from s3deploy.invalidator import Invalidator, InvalidationOptions
from s3deploy.logger import log

TARGET_DIRECT = 'direct'
TARGET_REMOTE = 'remote'


class Site(object):
    def __init__(self, name, local_path, dist_directory='dist',
                 bucket_name=None, distribution_id=None, stack_name=None):
        self.name = name
        self.local_path = local_path
        self.dist_directory = dist_directory or ''
        self.bucket_name = bucket_name
        self.distribution_id = distribution_id
        self.stack_name = stack_name

    def __repr__(self):
        return '<Site: %s>' % self.name

    @property
    def dist_path(self):
        return os.path.join(os.path.expanduser(self.local_path),
                            self.dist_directory)

    @classmethod
    def from_config(cls, name, section):
        return cls(name, section.local_path,
                   dist_directory=section.get('dist_directory'),
                   bucket_name=section.get('bucket_name'),
                   distribution_id=section.get('distribution_id'),
                   stack_name=section.get('stack_name'))


class DeployOptions(object):
    def __init__(self, environment='default', dry_run=False, force=False,
                 profile=None, region=None):
        self.environment = environment
        self.dry_run = dry_run
        self.force = force
        self.profile = profile
        self.region = region


class DeploySettings(object):
    """
    Deployment behaviour shared by every site (see [global], [cloudfront]
    and [versioning] in the config)
    """
    def __init__(self, strategy=static.DIRECT, enable_remote_deployment=False,
                 default_profile=None, default_region=None,
                 enable_invalidation=True, invalidation_paths=None,
                 wait_for_invalidation=False,
                 max_wait_time=static.INVALIDATION_MAX_WAIT,
                 poll_interval=static.INVALIDATION_POLL_INTERVAL,
                 version_prefix=static.DEFAULT_VERSION_PREFIX, max_workers=1,
                 show_progress=False):
        self.strategy = strategy
        self.enable_remote_deployment = enable_remote_deployment
        self.default_profile = default_profile
        self.default_region = default_region
        self.enable_invalidation = enable_invalidation
        self.invalidation_paths = list(invalidation_paths or
                                       static.DEFAULT_INVALIDATION_PATHS)
        self.wait_for_invalidation = wait_for_invalidation
        self.max_wait_time = max_wait_time
        self.poll_interval = poll_interval
        self.version_prefix = version_prefix
        self.max_workers = max_workers
        self.show_progress = show_progress


class DeploymentTarget(object):
    def __init__(self, bucket_name, region, distribution_id=None,
                 ready_for_deployment=True, source=TARGET_DIRECT,
                 stack_name=None):
        self.bucket_name = bucket_name
        self.region = region
        self.distribution_id = distribution_id
        self.ready_for_deployment = ready_for_deployment
        self.source = source
        self.stack_name = stack_name

    def __repr__(self):
        return '<DeploymentTarget: s3://%s (%s)>' % (self.bucket_name,
                                                     self.source)


class SiteDeployer(object):
    """
    Deploys sites to S3 and invalidates their CloudFront distributions

    s3_factory and cf_factory are called with (profile, region) and must
    return EasyS3/EasyCF-like objects. stack_inspector is only needed when
    remote deployment is enabled.
    """
    def __init__(self, s3_factory, cf_factory, stack_inspector=None,
                 settings=None, publisher=None, cancel_event=None):
        self.s3_factory = s3_factory
        self.cf_factory = cf_factory
        self.stack_inspector = stack_inspector
        self.settings = settings or DeploySettings()
        self.events = publisher or events.EventPublisher()
        self.cancel_event = cancel_event or threading.Event()

    def cancel(self):
        self.cancel_event.set()

    def get_region(self, options):
        return (options.region or self.settings.default_region or
                static.DEFAULT_REGION)

    def get_profile(self, options):
        return options.profile or self.settings.default_profile

    def get_target_source(self, site):
        if self.settings.enable_remote_deployment and site.stack_name:
            return TARGET_REMOTE
        return TARGET_DIRECT

    def resolve_target(self, site, options):
        resolvers = {
            TARGET_REMOTE: self._resolve_remote_target,
            TARGET_DIRECT: self._resolve_direct_target,
        }
        target = resolvers[self.get_target_source(site)](site, options)
        if not target.ready_for_deployment:
            raise exception.StackNotReady(target.stack_name or site.name,
                                          'not ready')
        return target

    def _resolve_direct_target(self, site, options):
        if not site.bucket_name:
            raise exception.BucketNotConfigured(site.name)
        return DeploymentTarget(site.bucket_name, self.get_region(options),
                                distribution_id=site.distribution_id,
                                source=TARGET_DIRECT)

    def _resolve_remote_target(self, site, options):
        if self.stack_inspector is None:
            raise exception.ConfigError("stack inspection is not available")
        result = self.stack_inspector.inspect_stack(
            site.stack_name, profile=self.get_profile(options),
            region=self.get_region(options))
        if not result.success:
            self.events.publish(events.STACK_INSPECTION_FAILED,
                                site=site.name, stack_name=site.stack_name,
                                error=result.error)
            raise exception.StackInspectionFailed(site.stack_name,
                                                  result.error,
                                                  result.recommendations)
        snapshot = result.snapshot
        if not snapshot.ready_for_deployment:
            raise exception.StackNotReady(site.stack_name, snapshot.status)
        return self.target_from_snapshot(snapshot)

    def target_from_snapshot(self, snapshot):
        bucket_name = snapshot.find_output(static.BUCKET_OUTPUT_KEYS)
        if not bucket_name:
            raise exception.BucketOutputNotFound(snapshot.stack_name,
                                                 static.BUCKET_OUTPUT_KEYS)
        distribution_id = snapshot.find_output(
            static.DISTRIBUTION_OUTPUT_KEYS)
        return DeploymentTarget(bucket_name, snapshot.region,
                                distribution_id=distribution_id,
                                ready_for_deployment=True,
                                source=TARGET_REMOTE,
                                stack_name=snapshot.stack_name)

    def get_dist_path(self, site):
        dist_path = site.dist_path
        if not os.path.isdir(dist_path):
            raise exception.DistDirectoryNotFound(dist_path)
        return dist_path

    def should_invalidate(self, target, options):
        return bool(target.distribution_id and
                    self.settings.enable_invalidation and
                    not options.dry_run)

    def deploy_site(self, site, options):
        """
        Deploy a single site. Resolution errors (missing bucket, missing
        dist directory, stack not ready) are raised before anything is
        written. Upload failures are returned as a failed result.
        """
        start = time.time()
        self.events.publish(events.BEFORE_SITE_DEPLOY, site=site.name,
                            environment=options.environment,
                            dist_directory=site.dist_directory)
        try:
            target = self.resolve_target(site, options)
            dist_path = self.get_dist_path(site)
        except exception.BaseException as e:
            self._publish_failure(site, options, e, start)
            raise
        log.info("Deploying '%s' from %s to s3://%s" % (site.name, dist_path,
                                                       target.bucket_name))
        result = self.upload(site, target, dist_path, options)
        if not result.success:
            self._publish_failure(site, options, result.error, start,
                                  result=result)
            return result
        if self.should_invalidate(target, options):
            inv = self.invalidate(site, target, options)
            result.invalidation_id = inv.invalidation_id
            if not inv.success:
                result.invalidation_error = inv.error
                log.warning("Site '%s' deployed but invalidation failed: %s" %
                            (site.name, inv.error))
        result.duration_seconds = int(round(time.time() - start))
        self.events.progress(site.name, events.STAGE_COMPLETED, 100,
                             "Deployed %s" % site.name)
        self.events.publish(events.AFTER_SITE_DEPLOY, site=site.name,
                            environment=options.environment, success=True,
                            result=result)
        log.info("Successfully deployed site: %s" % site.name)
        return result

    def upload(self, site, target, dist_path, options):
        profile = self.get_profile(options)
        s3 = self.s3_factory(profile, target.region)
        uploader = Uploader(s3, publisher=self.events)
        upload_options = UploadOptions(
            site.name, strategy=self.settings.strategy,
            dry_run=options.dry_run, region=target.region, profile=profile,
            version_prefix=self.settings.version_prefix,
            max_workers=self.settings.max_workers, force=options.force,
            show_progress=self.settings.show_progress)
        return uploader.upload_site(dist_path, target.bucket_name,
                                    upload_options)

    def invalidate(self, site, target, options):
        cf = self.cf_factory(self.get_profile(options), target.region)
        invalidator = Invalidator(cf, publisher=self.events,
                                  cancel_event=self.cancel_event)
        inv_options = InvalidationOptions(
            site.name,
            wait_for_completion=self.settings.wait_for_invalidation,
            max_wait_time=self.settings.max_wait_time,
            poll_interval=self.settings.poll_interval)
        return invalidator.invalidate(target.distribution_id,
                                      self.settings.invalidation_paths,
                                      inv_options)

    def deploy_sites(self, sites, options):
        """
        Deploy each site independently. Returns a dict of site name to
        DeploymentResult; a site that raises is recorded as failed.
        """
        results = {}
        for site in sites:
            try:
                results[site.name] = self.deploy_site(site, options)
            except exception.BaseException as e:
                log.error("Failed to deploy site '%s': %s" % (site.name, e))
                results[site.name] = DeploymentResult.failure(e)
        return results

    def inspect_stack(self, stack_name, profile=None, region=None):
        if not self.settings.enable_remote_deployment or \
           self.stack_inspector is None:
            raise exception.ConfigError(
                "Stack inspection is not enabled. Set "
                "ENABLE_REMOTE_DEPLOYMENT = True in the [global] section.")
        return self.stack_inspector.inspect_stack(
            stack_name, profile=profile or self.settings.default_profile,
            region=region or self.settings.default_region)

    def _publish_failure(self, site, options, error, start, result=None):
        duration = int(round(time.time() - start))
        if result is None:
            result = DeploymentResult.failure(error,
                                              duration_seconds=duration)
        self.events.publish(events.AFTER_SITE_DEPLOY, site=site.name,
                            environment=options.environment, success=False,
                            result=result, error=str(error))
