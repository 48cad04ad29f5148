"""
S3/CloudFront/CloudFormation Utility Classes
"""
import boto3
import botocore.config
from botocore.exceptions import BotoCoreError, ClientError
from botocore.exceptions import NoCredentialsError, PartialCredentialsError

from s3deploy import static
from s3deploy import exception
from s3deploy.logger import log

NOT_FOUND_CODES = ('404', 'NotFound', 'NoSuchKey')


class EasyAWS(object):
    def __init__(self, service_name, aws_access_key_id=None,
                 aws_secret_access_key=None, aws_session_token=None,
                 aws_profile=None, aws_region_name=None, **kwargs):
        """
        Create an EasyAWS object for the boto3 service_name.

        Credentials, profile and region are passed explicitly to a private
        boto3 Session; when all are omitted boto3's default credential
        chain is used. The process environment is never modified.

        kwargs are passed to the client's botocore Config
        """
        self.service_name = service_name
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self.aws_session_token = aws_session_token
        self.aws_profile = aws_profile
        self.aws_region_name = aws_region_name or static.DEFAULT_REGION
        self._conn = None
        self._kwargs = dict(connect_timeout=static.AWS_CONNECT_TIMEOUT,
                            read_timeout=static.AWS_READ_TIMEOUT,
                            retries=dict(max_attempts=static.AWS_MAX_ATTEMPTS,
                                         mode='standard'))
        self._kwargs.update(kwargs)

    def __repr__(self):
        return '<%s: %s (%s)>' % (self.__class__.__name__, self.service_name,
                                  self.aws_region_name)

    @property
    def region(self):
        return self.aws_region_name

    @property
    def conn(self):
        if self._conn is None:
            log.debug('creating %s client in %s (profile = %s)' %
                      (self.service_name, self.aws_region_name,
                       self.aws_profile))
            try:
                session = boto3.session.Session(
                    aws_access_key_id=self.aws_access_key_id,
                    aws_secret_access_key=self.aws_secret_access_key,
                    aws_session_token=self.aws_session_token,
                    profile_name=self.aws_profile,
                    region_name=self.aws_region_name)
                config = botocore.config.Config(**self._kwargs)
                self._conn = session.client(self.service_name, config=config)
            except (BotoCoreError, ValueError) as e:
                raise exception.ClientInitFailed(self.service_name, e)
        return self._conn

    def _call(self, operation, **params):
        """
        Invoke a client operation, translating botocore errors into
        s3deploy.exception.AWSError subclasses
        """
        method = getattr(self.conn, operation)
        try:
            return method(**params)
        except (NoCredentialsError, PartialCredentialsError) as e:
            raise exception.ClientInitFailed(self.service_name, e)
        except ClientError as e:
            error = e.response.get('Error', {})
            raise exception.RemoteCallFailed(operation, error.get('Message')
                                             or str(e),
                                             error_code=error.get('Code'))
        except BotoCoreError as e:
            raise exception.RemoteCallFailed(operation, e)


class EasyS3(EasyAWS):
    def __init__(self, **kwargs):
        super(EasyS3, self).__init__('s3', **kwargs)

    def bucket_exists(self, bucket_name):
        """
        Check if bucket_name exists on S3
        """
        try:
            self._call('head_bucket', Bucket=bucket_name)
            return True
        except exception.RemoteCallFailed as e:
            if e.error_code in NOT_FOUND_CODES + ('NoSuchBucket',):
                return False
            raise

    def head_object(self, bucket_name, key):
        """
        Returns the HEAD response for key or None if key does not exist
        """
        try:
            return self._call('head_object', Bucket=bucket_name, Key=key)
        except exception.RemoteCallFailed as e:
            if e.error_code in NOT_FOUND_CODES:
                return None
            raise

    def get_remote_hash(self, bucket_name, key):
        """
        Returns the MD5 recorded for key at upload time, falling back to
        the object's ETag. Returns None if key does not exist.
        """
        head = self.head_object(bucket_name, key)
        if head is None:
            return None
        md5 = head.get('Metadata', {}).get('md5')
        if md5:
            return md5
        return head.get('ETag', '').replace('"', '')

    def needs_upload(self, bucket_name, key, local_hash):
        """
        Returns False only when the remote object's hash is confirmed to
        match local_hash. Missing objects and failed lookups return True.
        """
        try:
            remote_hash = self.get_remote_hash(bucket_name, key)
        except exception.AWSError as e:
            log.debug("unable to check s3://%s/%s: %s" % (bucket_name, key,
                                                          e))
            return True
        if remote_hash is None:
            log.debug("s3 path not found: %s" % key)
            return True
        log.debug('s3 path found: %s with hash: %s' % (key, remote_hash))
        return remote_hash != local_hash

    def put_file(self, path, bucket_name, key, content_type=None,
                 cache_control=None, metadata=None):
        params = dict(Bucket=bucket_name, Key=key)
        if content_type:
            params['ContentType'] = content_type
        if cache_control:
            params['CacheControl'] = cache_control
        if metadata:
            params['Metadata'] = metadata
        with open(path, 'rb') as body:
            try:
                return self._call('put_object', Body=body, **params)
            except exception.RemoteCallFailed as e:
                if e.error_code == 'NoSuchBucket':
                    raise exception.BucketDoesNotExist(bucket_name)
                raise


class EasyCF(EasyAWS):
    def __init__(self, **kwargs):
        super(EasyCF, self).__init__('cloudfront', **kwargs)

    def create_invalidation(self, distribution_id, paths, caller_reference):
        """
        Submit an invalidation batch and return its id
        """
        batch = dict(Paths=dict(Quantity=len(paths), Items=list(paths)),
                     CallerReference=caller_reference)
        resp = self._call('create_invalidation',
                          DistributionId=distribution_id,
                          InvalidationBatch=batch)
        invalidation_id = resp.get('Invalidation', {}).get('Id')
        if not invalidation_id:
            raise exception.InvalidationCreateFailed(distribution_id,
                                                     "no id returned")
        log.info("Created CloudFront invalidation: %s" % invalidation_id)
        return invalidation_id

    def get_invalidation_status(self, distribution_id, invalidation_id):
        resp = self._call('get_invalidation', DistributionId=distribution_id,
                          Id=invalidation_id)
        return resp.get('Invalidation', {}).get('Status')


class EasyCFN(EasyAWS):
    def __init__(self, **kwargs):
        super(EasyCFN, self).__init__('cloudformation', **kwargs)

    def describe_stack(self, stack_name):
        """
        Returns the stack description or None if stack_name does not exist
        """
        try:
            resp = self._call('describe_stacks', StackName=stack_name)
        except exception.RemoteCallFailed as e:
            if e.error_code == 'ValidationError' and \
               'does not exist' in str(e):
                return None
            raise
        stacks = resp.get('Stacks') or []
        if stacks:
            return stacks[0]
