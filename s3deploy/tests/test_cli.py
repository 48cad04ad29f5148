import signal

import boto3
import pytest
from moto import mock_aws

from s3deploy import cli

from s3deploy.tests.conftest import REGION


@pytest.fixture
def config_file(tmp_path, site_dir):
    path = tmp_path / 'config'
    path.write_text("[site web]\nLOCAL_PATH = %s\nBUCKET_NAME = site-bucket\n"
                    % site_dir.parent)
    return str(path)


def run(monkeypatch, *args):
    monkeypatch.setattr('sys.argv', ['s3deploy'] + list(args))
    monkeypatch.setattr(signal, 'signal', lambda *a: None)
    cli.S3DeployCLI().main()


def test_list(monkeypatch, capsys, config_file):
    run(monkeypatch, '-c', config_file, 'list')
    out = capsys.readouterr().out
    assert 'web' in out
    assert 'Bucket: site-bucket' in out


def test_deploy_end_to_end(monkeypatch, config_file):
    with mock_aws():
        s3 = boto3.client('s3', region_name=REGION)
        s3.create_bucket(Bucket='site-bucket')
        run(monkeypatch, '-c', config_file, 'deploy', 'web')
        keys = sorted(o['Key'] for o in
                      s3.list_objects_v2(Bucket='site-bucket')['Contents'])
        assert keys == ['app.js', 'index.html', 'logo.png']
        head = s3.head_object(Bucket='site-bucket', Key='index.html')
        assert head['ContentType'] == 'text/html'
        assert 'md5' in head['Metadata']


def test_unknown_site_exits(monkeypatch, caplog, config_file):
    with pytest.raises(SystemExit) as excinfo:
        run(monkeypatch, '-c', config_file, 'deploy', 'blog')
    assert excinfo.value.code == 1
    assert "SiteDoesNotExist: site 'blog' is not defined" in caplog.text


def test_config_errors_are_explained(monkeypatch, caplog, tmp_path):
    path = tmp_path / 'config'
    path.write_text("[global]\nMAX_WORKERS = many\n")
    with pytest.raises(SystemExit):
        run(monkeypatch, '-c', str(path), 'list')
    assert 'ConfigError: Expected integer value' in caplog.text


def test_unknown_command(monkeypatch, config_file):
    with pytest.raises(SystemExit):
        run(monkeypatch, '-c', config_file, 'frobnicate')


def test_sync(monkeypatch, config_file, site_dir):
    with mock_aws():
        s3 = boto3.client('s3', region_name=REGION)
        s3.create_bucket(Bucket='other-bucket')
        run(monkeypatch, '-c', config_file, 'sync', 'other-bucket',
            str(site_dir))
        resp = s3.list_objects_v2(Bucket='other-bucket')
        assert resp['KeyCount'] == 3


def test_sync_to_missing_bucket(monkeypatch, caplog, config_file, site_dir):
    with mock_aws():
        with pytest.raises(SystemExit):
            run(monkeypatch, '-c', config_file, 'sync', 'no-such-bucket',
                str(site_dir))
    assert "BucketDoesNotExist: bucket 'no-such-bucket'" in caplog.text
