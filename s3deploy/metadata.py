"""
Content-Type and Cache-Control inference for uploaded files
"""
import posixpath

DEFAULT_CONTENT_TYPE = 'application/octet-stream'

CONTENT_TYPES = {
    '.html': 'text/html',
    '.htm': 'text/html',
    '.css': 'text/css',
    '.js': 'application/javascript',
    '.mjs': 'application/javascript',
    '.json': 'application/json',
    '.map': 'application/json',
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.svg': 'image/svg+xml',
    '.ico': 'image/x-icon',
    '.webp': 'image/webp',
    '.woff': 'font/woff',
    '.woff2': 'font/woff2',
    '.ttf': 'font/ttf',
    '.otf': 'font/otf',
    '.eot': 'application/vnd.ms-fontobject',
    '.xml': 'application/xml',
    '.txt': 'text/plain',
    '.pdf': 'application/pdf',
    '.zip': 'application/zip',
    '.mp4': 'video/mp4',
    '.webm': 'video/webm',
    '.mp3': 'audio/mpeg',
    '.wav': 'audio/wav',
}

CACHE_IMMUTABLE = 'public, max-age=31536000, immutable'
CACHE_REVALIDATE = 'public, max-age=3600, must-revalidate'
CACHE_DEFAULT = 'public, max-age=86400'

IMMUTABLE_EXTENSIONS = frozenset([
    '.css', '.js', '.mjs', '.png', '.jpg', '.jpeg', '.gif', '.svg', '.ico',
    '.webp', '.woff', '.woff2', '.ttf', '.otf', '.eot',
])
HTML_EXTENSIONS = frozenset(['.html', '.htm'])


def get_extension(path):
    name = posixpath.basename(path.replace('\\', '/'))
    return posixpath.splitext(name)[1].lower()


def content_type(path):
    """
    Returns the MIME type for path based on its extension
    """
    return CONTENT_TYPES.get(get_extension(path), DEFAULT_CONTENT_TYPE)


def cache_control(path):
    """
    Returns the Cache-Control header for path:

    - fingerprinted assets (scripts, styles, images, fonts): one year
    - html documents: one hour, revalidated
    - anything else: one day
    """
    ext = get_extension(path)
    if ext in IMMUTABLE_EXTENSIONS:
        return CACHE_IMMUTABLE
    if ext in HTML_EXTENSIONS:
        return CACHE_REVALIDATE
    return CACHE_DEFAULT
