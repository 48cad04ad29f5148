import os
import sys

import pytest

from s3deploy import events
from s3deploy import static
from s3deploy import exception
from s3deploy.uploader import Uploader, UploadOptions

from s3deploy.tests.conftest import FakeS3

BUCKET = 'site-bucket'
IMMUTABLE = 'public, max-age=31536000, immutable'


def test_cold_deployment_uploads_every_file(fake_s3, site_dir, publisher,
                                            recorder):
    uploader = Uploader(fake_s3, publisher=publisher)
    result = uploader.upload_site(str(site_dir), BUCKET, UploadOptions('web'))
    assert result.success
    assert result.uploaded_file_count == 3
    assert result.skipped_file_count == 0
    assert result.version_token is None
    assert result.total_bytes == sum(p.stat().st_size
                                     for p in site_dir.iterdir())
    keys = sorted(k for (b, k) in fake_s3.objects)
    assert keys == ['app.js', 'index.html', 'logo.png']
    index = fake_s3.objects[(BUCKET, 'index.html')]
    assert index['ContentType'] == 'text/html'
    assert index['CacheControl'] == 'public, max-age=3600, must-revalidate'
    assert fake_s3.objects[(BUCKET, 'app.js')]['CacheControl'] == IMMUTABLE
    assert fake_s3.objects[(BUCKET, 'logo.png')]['CacheControl'] == IMMUTABLE
    meta = index['Metadata']
    assert meta['local-path'].endswith('index.html')
    assert meta['upload-timestamp']
    assert meta['md5'] == index['ETag']
    assert len(recorder.of_type(events.BEFORE_UPLOAD)) == 1
    assert len(recorder.of_type(events.AFTER_UPLOAD)) == 1


def test_second_run_uploads_nothing(fake_s3, site_dir):
    uploader = Uploader(fake_s3)
    uploader.upload_site(str(site_dir), BUCKET, UploadOptions('web'))
    result = uploader.upload_site(str(site_dir), BUCKET, UploadOptions('web'))
    assert result.success
    assert result.uploaded_file_count == 0
    assert result.skipped_file_count == 3
    assert result.total_bytes > 0
    assert fake_s3.count('put_object') == 3


def test_only_modified_files_are_uploaded(fake_s3, site_dir):
    uploader = Uploader(fake_s3)
    uploader.upload_site(str(site_dir), BUCKET, UploadOptions('web'))
    (site_dir / 'app.js').write_text('console.log("changed");')
    (site_dir / 'new.css').write_text('body {}')
    result = uploader.upload_site(str(site_dir), BUCKET, UploadOptions('web'))
    assert result.uploaded_file_count == 2
    assert result.skipped_file_count == 2


def test_force_uploads_unchanged_files(fake_s3, site_dir):
    uploader = Uploader(fake_s3)
    uploader.upload_site(str(site_dir), BUCKET, UploadOptions('web'))
    result = uploader.upload_site(str(site_dir), BUCKET,
                                  UploadOptions('web', force=True))
    assert result.uploaded_file_count == 3


def test_dry_run_writes_nothing(fake_s3, site_dir):
    uploader = Uploader(fake_s3)
    result = uploader.upload_site(str(site_dir), BUCKET,
                                  UploadOptions('web', dry_run=True))
    assert result.success
    assert result.uploaded_file_count == 0
    assert sorted(result.planned_keys) == ['app.js', 'index.html',
                                           'logo.png']
    assert fake_s3.count('put_object') == 0
    assert fake_s3.objects == {}


def test_versioned_keys_share_one_token_per_run(fake_s3, site_dir):
    uploader = Uploader(fake_s3)
    options = UploadOptions('web', strategy=static.VERSIONED)
    first = uploader.upload_site(str(site_dir), BUCKET, options)
    second = uploader.upload_site(str(site_dir), BUCKET, options)
    assert first.version_token != second.version_token
    assert first.version_token.startswith('v')
    # identical content still lands under a fresh prefix
    assert second.uploaded_file_count == 3
    prefixes = set(k.split('/')[0] for (b, k) in fake_s3.objects)
    assert prefixes == set([first.version_token, second.version_token])
    assert (BUCKET, '%s/index.html' % first.version_token) in \
        fake_s3.objects


def test_nested_keys_use_forward_slashes(fake_s3, site_dir):
    nested = site_dir / 'assets' / 'img'
    nested.mkdir(parents=True)
    (nested / 'bg.gif').write_bytes(b'GIF89a')
    (site_dir / '.well-known').mkdir()
    (site_dir / '.well-known' / 'security.txt').write_text('contact')
    Uploader(fake_s3).upload_site(str(site_dir), BUCKET, UploadOptions('web'))
    keys = set(k for (b, k) in fake_s3.objects)
    assert 'assets/img/bg.gif' in keys
    assert '.well-known/security.txt' in keys


def test_missing_dist_directory_fails_before_remote_calls(fake_s3, tmp_path):
    uploader = Uploader(fake_s3)
    with pytest.raises(exception.DistDirectoryNotFound):
        uploader.upload_site(str(tmp_path / 'dist'), BUCKET,
                             UploadOptions('web'))
    assert fake_s3.calls == []


def test_upload_failure_returns_failed_result(site_dir):
    s3 = FakeS3(fail_operations=['put_object'], error_code='AccessDenied')
    result = Uploader(s3).upload_site(str(site_dir), BUCKET,
                                      UploadOptions('web'))
    assert not result.success
    assert result.uploaded_file_count == 0
    assert result.total_bytes == 0
    assert 'put_object failed' in result.error
    # the run stops at the first failure
    assert s3.count('put_object') == 1


def test_missing_bucket_fails_run(site_dir):
    s3 = FakeS3(fail_operations=['put_object'], error_code='NoSuchBucket')
    result = Uploader(s3).upload_site(str(site_dir), BUCKET,
                                      UploadOptions('web'))
    assert not result.success
    assert "does not exist" in result.error


def test_progress_is_monotonic(fake_s3, site_dir, publisher, recorder):
    Uploader(fake_s3, publisher=publisher).upload_site(
        str(site_dir), BUCKET, UploadOptions('web'))
    ticks = [e.payload['progress']
             for e in recorder.of_type(events.DEPLOYMENT_PROGRESS)]
    assert ticks == [33, 67, 100]
    assert all(e.payload['stage'] == events.STAGE_UPLOADING
               for e in recorder.of_type(events.DEPLOYMENT_PROGRESS))


def test_parallel_upload(fake_s3, site_dir, publisher, recorder):
    for i in range(20):
        (site_dir / ('page%d.html' % i)).write_text('page %d' % i)
    result = Uploader(fake_s3, publisher=publisher).upload_site(
        str(site_dir), BUCKET, UploadOptions('web', max_workers=4))
    assert result.success
    assert result.uploaded_file_count == 23
    assert len(fake_s3.objects) == 23
    ticks = [e.payload['progress']
             for e in recorder.of_type(events.DEPLOYMENT_PROGRESS)]
    assert ticks == sorted(ticks)
    assert ticks[-1] == 100


def test_parallel_upload_failure(site_dir):
    s3 = FakeS3(fail_operations=['put_object'])
    result = Uploader(s3).upload_site(str(site_dir), BUCKET,
                                      UploadOptions('web', max_workers=3))
    assert not result.success
    assert result.uploaded_file_count == 0


def test_invalid_strategy():
    with pytest.raises(exception.ConfigError):
        UploadOptions('web', strategy='rsync')


def write_undecodable_file(site_dir):
    path = os.path.join(os.fsencode(str(site_dir)), b'caf\xe9.txt')
    with open(path, 'wb') as fp:
        fp.write(b'menu')


@pytest.mark.skipif(sys.platform != 'linux',
                    reason="needs a file system that allows non-UTF-8 names")
def test_undecodable_file_name_fails_run(fake_s3, site_dir):
    write_undecodable_file(site_dir)
    result = Uploader(fake_s3).upload_site(str(site_dir), BUCKET,
                                           UploadOptions('web'))
    assert not result.success
    assert result.uploaded_file_count == 0
    assert result.total_bytes == 0
    assert 'not valid UTF-8' in result.error
    assert fake_s3.count('put_object') == 0
