"""
Utils module for s3deploy
"""
import os
import re
import random
import string
import hashlib
import datetime
import posixpath
from urllib.parse import urlparse

from s3deploy import exception


MSWIN_DRIVE_LETTER_RE = re.compile('^([a-zA-Z]:)')
RANDOM_CHARS = string.ascii_lowercase + string.digits


def is_url(url):
    """
    Returns True if the provided string is a valid url
    """
    try:
        parts = urlparse(url)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


class AttributeDict(dict):
    """
    Subclass of dict that allows read-only attribute-like access to
    dictionary key/values
    """
    def __getattr__(self, name):
        try:
            return self.__getitem__(name)
        except KeyError:
            return super(AttributeDict, self).__getattribute__(name)


def find_files(path):
    """
    Yields every file below path, hidden files included, in a stable order
    """
    path = os.path.expanduser(path)
    if not os.path.isdir(path):
        raise exception.DistDirectoryNotFound(path)
    for root, dirs, files in os.walk(path):
        dirs.sort()
        for f in sorted(files):
            yield os.path.join(root, f)


def compute_md5(path):
    md5 = hashlib.md5()
    with open(path, 'rb') as f:
        while True:
            data = f.read(8192)
            if not data:
                break
            md5.update(data)
    return md5.hexdigest()


def strip_windows_drive_letter(path):
    return MSWIN_DRIVE_LETTER_RE.sub('', path)


def local_to_s3_path(path):
    # remove Windows driver letters (if any)
    path = strip_windows_drive_letter(path)
    # split path based on OS path separator
    parts = path.replace(os.path.sep, '/').replace('\\', '/').split('/')
    # join using unix path separator to match S3
    return posixpath.sep.join([p for p in parts if p and p != '.'])


def random_suffix(length=6):
    return ''.join(random.choice(RANDOM_CHARS) for _ in range(length))


def utc_now():
    return datetime.datetime.now(datetime.timezone.utc)


def iso_timestamp(dt=None):
    dt = dt or utc_now()
    return dt.strftime('%Y-%m-%dT%H:%M:%S.') + '%03dZ' % (
        dt.microsecond // 1000)


def generate_version_token(prefix='v', dt=None):
    """
    Returns a unique token used to namespace every key of one deployment,
    e.g. v2024-05-01T12-30-00-x8k2pq
    """
    dt = dt or utc_now()
    return '%s%s-%s' % (prefix or '', dt.strftime('%Y-%m-%dT%H-%M-%S'),
                        random_suffix())


def generate_caller_reference(prefix='s3deploy'):
    return '%s-%s-%s' % (prefix, iso_timestamp(), random_suffix())


def format_size(nbytes):
    units = ['B', 'KB', 'MB', 'GB']
    size = float(nbytes)
    unit = 0
    while size >= 1024 and unit < len(units) - 1:
        size /= 1024
        unit += 1
    return '%.1f %s' % (size, units[unit])
