"""
Incremental upload of a site's distribution directory to S3
"""
import os
import time
import posixpath
from concurrent import futures
from urllib.parse import quote

import progressbar

from s3deploy import utils
from s3deploy import static
from s3deploy import events
from s3deploy import metadata
from s3deploy import exception
from s3deploy.logger import log


class FileUploadRecord(object):
    """
    One local file of a deployment run and where it goes on S3
    """
    def __init__(self, local_path, remote_key, size, content_type,
                 content_hash, needs_upload=True):
        self.local_path = local_path
        self.remote_key = remote_key
        self.size = size
        self.content_type = content_type
        self.content_hash = content_hash
        self.needs_upload = needs_upload

    def __repr__(self):
        return '<FileUploadRecord: %s (%s)>' % (self.remote_key,
                                                self.needs_upload)

    @property
    def cache_control(self):
        return metadata.cache_control(self.remote_key)


class UploadOptions(object):
    def __init__(self, site, strategy=static.DIRECT, dry_run=False,
                 region=None, profile=None,
                 version_prefix=static.DEFAULT_VERSION_PREFIX,
                 max_workers=1, force=False, show_progress=False):
        if strategy not in static.DEPLOYMENT_STRATEGIES:
            raise exception.ConfigError(
                "deployment strategy must be one of: %s" %
                ', '.join(static.DEPLOYMENT_STRATEGIES))
        self.site = site
        self.strategy = strategy
        self.dry_run = dry_run
        self.region = region
        self.profile = profile
        self.version_prefix = version_prefix
        self.max_workers = max(1, max_workers or 1)
        self.force = force
        self.show_progress = show_progress

    @property
    def versioned(self):
        return self.strategy == static.VERSIONED


class DeploymentResult(object):
    def __init__(self, success, uploaded_file_count=0, total_bytes=0,
                 duration_seconds=0, version_token=None, invalidation_id=None,
                 error=None, skipped_file_count=0, planned_keys=None,
                 invalidation_error=None):
        self.success = success
        self.uploaded_file_count = uploaded_file_count
        self.skipped_file_count = skipped_file_count
        self.total_bytes = total_bytes
        self.duration_seconds = duration_seconds
        self.version_token = version_token
        self.invalidation_id = invalidation_id
        self.invalidation_error = invalidation_error
        self.planned_keys = planned_keys or []
        self.error = error

    def __repr__(self):
        if not self.success:
            return '<DeploymentResult: failed (%s)>' % self.error
        return '<DeploymentResult: %d uploaded, %d bytes>' % (
            self.uploaded_file_count, self.total_bytes)

    @classmethod
    def failure(cls, error, duration_seconds=0):
        return cls(False, duration_seconds=duration_seconds, error=str(error))


class Uploader(object):
    def __init__(self, s3, publisher=None):
        self.s3 = s3
        self.events = publisher or events.EventPublisher()

    def _create_progress_bar(self, total):
        widgets = [progressbar.SimpleProgress(), ' ', progressbar.Bar(),
                   ' ', progressbar.Percentage()]
        return progressbar.ProgressBar(max_value=total, widgets=widgets)

    def upload_site(self, dist_path, bucket_name, options):
        """
        Upload every new or modified file below dist_path to bucket_name.

        Raises DistDirectoryNotFound before any remote call when dist_path
        is not a directory. Any other error stops the run and is reported
        through the returned DeploymentResult.
        """
        if not os.path.isdir(dist_path):
            raise exception.DistDirectoryNotFound(dist_path)
        start = time.time()
        version_token = None
        if options.versioned:
            version_token = utils.generate_version_token(
                options.version_prefix)
            log.info("Deploying '%s' as version %s" % (options.site,
                                                       version_token))
        try:
            records = self.prepare_uploads(dist_path, bucket_name,
                                           version_token=version_token,
                                           force=options.force)
            total_bytes = sum(r.size for r in records)
            self.events.publish(events.BEFORE_UPLOAD, site=options.site,
                                bucket_name=bucket_name,
                                file_count=len(records),
                                total_size=total_bytes)
            pending = [r for r in records if r.needs_upload]
            skipped = len(records) - len(pending)
            planned_keys = []
            uploaded = 0
            if options.dry_run:
                planned_keys = self.log_dry_run(pending, bucket_name)
            else:
                uploaded = self.upload_files(pending, bucket_name, options)
        except (exception.BaseException, OSError) as e:
            duration = int(round(time.time() - start))
            log.error("Upload of '%s' to %s failed: %s" % (options.site,
                                                           bucket_name, e))
            return DeploymentResult.failure(e, duration_seconds=duration)
        duration = int(round(time.time() - start))
        self.events.publish(events.AFTER_UPLOAD, site=options.site,
                            bucket_name=bucket_name, uploaded_files=uploaded,
                            skipped_files=skipped, duration=duration)
        log.info("Uploaded %d file(s), %d unchanged (%s total)" %
                 (uploaded, skipped, utils.format_size(total_bytes)))
        return DeploymentResult(True, uploaded_file_count=uploaded,
                                skipped_file_count=skipped,
                                total_bytes=total_bytes,
                                duration_seconds=duration,
                                version_token=version_token,
                                planned_keys=planned_keys)

    def prepare_uploads(self, dist_path, bucket_name, version_token=None,
                        force=False):
        """
        Returns a FileUploadRecord for every file below dist_path
        """
        log.info("Scanning %s" % dist_path)
        records = []
        for path in utils.find_files(dist_path):
            try:
                path.encode('utf-8')
            except UnicodeEncodeError:
                # undecodable bytes come back from os.walk as surrogates
                raise exception.InvalidFileName(path)
            key = utils.local_to_s3_path(os.path.relpath(path, dist_path))
            if version_token:
                key = posixpath.join(version_token, key)
            content_hash = utils.compute_md5(path)
            if force:
                needs_upload = True
            else:
                needs_upload = self.s3.needs_upload(bucket_name, key,
                                                    content_hash)
            if not needs_upload:
                log.debug("S3 path '%s' is in sync" % key)
            records.append(FileUploadRecord(
                local_path=path, remote_key=key,
                size=os.path.getsize(path),
                content_type=metadata.content_type(path),
                content_hash=content_hash, needs_upload=needs_upload))
        return records

    def log_dry_run(self, records, bucket_name):
        log.info("DRY RUN: Would upload %d file(s) to %s" % (len(records),
                                                            bucket_name))
        for record in records:
            log.info("  %s (%s)" % (record.remote_key,
                                    utils.format_size(record.size)))
        return [r.remote_key for r in records]

    def upload_file(self, record, bucket_name):
        log.debug("Uploading %s -> s3://%s/%s" % (record.local_path,
                                                  bucket_name,
                                                  record.remote_key))
        meta = {
            'upload-timestamp': utils.iso_timestamp(),
            'local-path': quote(record.local_path, safe='/'),
            'md5': record.content_hash,
        }
        self.s3.put_file(record.local_path, bucket_name, record.remote_key,
                         content_type=record.content_type,
                         cache_control=record.cache_control, metadata=meta)
        return record

    def upload_files(self, records, bucket_name, options):
        """
        Upload records sequentially or, when options.max_workers > 1, with
        a bounded thread pool. The first failure cancels pending uploads
        and is re-raised. Returns the number of files uploaded.
        """
        total = len(records)
        if not total:
            return 0
        pbar = None
        if options.show_progress:
            pbar = self._create_progress_bar(total)
        done = 0
        try:
            # completions are counted on this thread so progress only grows
            for record in self._iter_uploads(records, bucket_name,
                                             options.max_workers):
                done += 1
                if pbar:
                    pbar.update(done)
                self.events.progress(options.site, events.STAGE_UPLOADING,
                                     int(round(done * 100.0 / total)),
                                     "Uploaded %s" % record.remote_key)
        finally:
            if pbar:
                pbar.finish()
        return done

    def _iter_uploads(self, records, bucket_name, max_workers):
        if max_workers <= 1:
            for record in records:
                yield self.upload_file(record, bucket_name)
            return
        with futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
            pending = [pool.submit(self.upload_file, r, bucket_name)
                       for r in records]
            try:
                for future in futures.as_completed(pending):
                    yield future.result()
            except BaseException:
                for future in pending:
                    future.cancel()
                raise
