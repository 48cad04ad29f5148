import boto3
import pytest
from moto import mock_aws

from s3deploy import awsutils
from s3deploy import exception
from s3deploy import utils

from s3deploy.tests.conftest import FakeS3, REGION

BUCKET = 'site-bucket'


@pytest.fixture
def s3():
    with mock_aws():
        boto3.client('s3', region_name=REGION).create_bucket(Bucket=BUCKET)
        yield awsutils.EasyS3(aws_region_name=REGION)


def test_missing_object_needs_upload(s3):
    assert s3.head_object(BUCKET, 'index.html') is None
    assert s3.needs_upload(BUCKET, 'index.html', 'abc')


def test_put_file_then_hash_matches(s3, tmp_path):
    path = tmp_path / 'index.html'
    path.write_text('<html></html>')
    md5 = utils.compute_md5(str(path))
    s3.put_file(str(path), BUCKET, 'index.html', content_type='text/html',
                cache_control='public, max-age=3600, must-revalidate',
                metadata={'md5': md5})
    head = s3.head_object(BUCKET, 'index.html')
    assert head['ContentType'] == 'text/html'
    assert head['CacheControl'] == 'public, max-age=3600, must-revalidate'
    assert s3.get_remote_hash(BUCKET, 'index.html') == md5
    assert not s3.needs_upload(BUCKET, 'index.html', md5)
    assert s3.needs_upload(BUCKET, 'index.html', 'different')


def test_etag_used_without_md5_metadata(s3, tmp_path):
    path = tmp_path / 'a.txt'
    path.write_text('plain')
    s3.put_file(str(path), BUCKET, 'a.txt')
    assert s3.get_remote_hash(BUCKET, 'a.txt') == \
        utils.compute_md5(str(path))


def test_put_file_to_missing_bucket(s3, tmp_path):
    path = tmp_path / 'a.txt'
    path.write_text('plain')
    with pytest.raises(exception.BucketDoesNotExist):
        s3.put_file(str(path), 'no-such-bucket', 'a.txt')


def test_bucket_exists(s3):
    assert s3.bucket_exists(BUCKET)
    assert not s3.bucket_exists('no-such-bucket')


def test_lookup_errors_default_to_upload():
    s3 = FakeS3(fail_operations=['head_object'])
    assert s3.needs_upload(BUCKET, 'index.html', 'abc')


def test_remote_errors_are_wrapped():
    s3 = FakeS3(fail_operations=['head_object'])
    with pytest.raises(exception.RemoteCallFailed) as excinfo:
        s3.head_object(BUCKET, 'index.html')
    assert excinfo.value.error_code == 'AccessDenied'


def test_unknown_profile_fails_client_init():
    s3 = awsutils.EasyS3(aws_profile='no-such-profile-s3deploy')
    with pytest.raises(exception.ClientInitFailed):
        s3.conn


def test_clients_get_explicit_region():
    cf = awsutils.EasyCF(aws_region_name='eu-west-1')
    assert cf.region == 'eu-west-1'
    assert awsutils.EasyCFN().region == 'us-east-1'
