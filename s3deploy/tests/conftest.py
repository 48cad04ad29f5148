import hashlib

import pytest

from s3deploy import awsutils
from s3deploy import exception
from s3deploy import static
from s3deploy.events import EventPublisher, EventRecorder
from s3deploy.stackinspector import StackInspectionResult, StackSnapshot

REGION = 'us-east-1'


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so nothing can reach a real AWS account"""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', REGION)
    monkeypatch.delenv('AWS_PROFILE', raising=False)
    monkeypatch.delenv('S3DEPLOY_CONFIG', raising=False)


class FakeS3(awsutils.EasyS3):
    """
    EasyS3 backed by a dict instead of the S3 API
    """
    def __init__(self, fail_operations=(), error_code='AccessDenied'):
        super(FakeS3, self).__init__(aws_region_name=REGION)
        self.objects = {}
        self.calls = []
        self.fail_operations = set(fail_operations)
        self.error_code = error_code

    def _call(self, operation, **params):
        self.calls.append((operation, params.get('Key')))
        if operation in self.fail_operations:
            raise exception.RemoteCallFailed(operation, 'boom',
                                             error_code=self.error_code)
        key = (params['Bucket'], params.get('Key'))
        if operation == 'head_object':
            obj = self.objects.get(key)
            if obj is None:
                raise exception.RemoteCallFailed(operation, 'Not Found',
                                                 error_code='404')
            return dict(ETag='"%s"' % obj['ETag'],
                        Metadata=dict(obj.get('Metadata', {})))
        if operation == 'put_object':
            body = params.pop('Body').read()
            obj = dict(params)
            obj['ETag'] = hashlib.md5(body).hexdigest()
            obj['Body'] = body
            self.objects[key] = obj
            return dict(ETag='"%s"' % obj['ETag'])
        raise AssertionError("unexpected operation %s" % operation)

    def count(self, operation):
        return len([c for c in self.calls if c[0] == operation])


class FakeCF(object):
    """
    EasyCF stand-in returning a scripted sequence of statuses
    """
    def __init__(self, statuses=(), create_error=None, poll_errors=()):
        self.statuses = list(statuses)
        self.create_error = create_error
        self.poll_errors = list(poll_errors)
        self.created = []
        self.polls = 0

    def create_invalidation(self, distribution_id, paths, caller_reference):
        if self.create_error:
            raise self.create_error
        self.created.append((distribution_id, list(paths), caller_reference))
        return 'I%d' % len(self.created)

    def get_invalidation_status(self, distribution_id, invalidation_id):
        self.polls += 1
        if self.poll_errors and self.poll_errors.pop(0):
            raise exception.RemoteCallFailed('get_invalidation', 'throttled')
        if self.statuses:
            return self.statuses.pop(0)
        return static.INVALIDATION_IN_PROGRESS


class FakeCancelEvent(object):
    """
    threading.Event replacement whose wait() never blocks
    """
    def __init__(self, cancel_after=None):
        self.waits = []
        self.cancel_after = cancel_after
        self._set = False

    def wait(self, timeout=None):
        self.waits.append(timeout)
        if self.cancel_after is not None and \
           len(self.waits) >= self.cancel_after:
            self._set = True
        return self._set

    def set(self):
        self._set = True

    def is_set(self):
        return self._set


class FakeStackInspector(object):
    def __init__(self, outputs=None, status='CREATE_COMPLETE', error=None):
        self.outputs = outputs or {}
        self.status = status
        self.error = error
        self.calls = []

    def inspect_stack(self, stack_name, profile=None, region=None):
        self.calls.append((stack_name, profile, region))
        if self.error:
            return StackInspectionResult(False, error=self.error,
                                         recommendations=['check it'])
        snapshot = StackSnapshot(stack_name, region or REGION, self.status,
                                 self.outputs)
        return StackInspectionResult(True, snapshot=snapshot)


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def publisher(recorder):
    return EventPublisher([recorder])


@pytest.fixture
def site_dir(tmp_path):
    """A built site: <tmp>/web/dist/{index.html,app.js,logo.png}"""
    dist = tmp_path / 'web' / 'dist'
    dist.mkdir(parents=True)
    (dist / 'index.html').write_text('<html>hello</html>')
    (dist / 'app.js').write_text('console.log("hi");')
    (dist / 'logo.png').write_bytes(b'\x89PNG\r\n\x1a\n' + b'\x00' * 32)
    return dist
