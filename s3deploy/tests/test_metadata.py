import pytest

from s3deploy import metadata


@pytest.mark.parametrize('path, expected', [
    ('index.html', 'text/html'),
    ('styles/site.CSS', 'text/css'),
    ('static/js/app.js', 'application/javascript'),
    ('data/feed.json', 'application/json'),
    ('img/logo.png', 'image/png'),
    ('img/photo.jpeg', 'image/jpeg'),
    ('icons/icon.svg', 'image/svg+xml'),
    ('fonts/inter.woff2', 'font/woff2'),
    ('media/intro.mp4', 'video/mp4'),
    ('media/jingle.mp3', 'audio/mpeg'),
    ('docs/manual.pdf', 'application/pdf'),
    ('downloads/site.zip', 'application/zip'),
])
def test_content_type_known_extensions(path, expected):
    assert metadata.content_type(path) == expected


def test_content_type_falls_back_to_binary():
    assert metadata.content_type('bin/blob.xyz') == 'application/octet-stream'
    assert metadata.content_type('LICENSE') == 'application/octet-stream'
    assert metadata.content_type('.htaccess') == 'application/octet-stream'


def test_cache_control_tiers():
    immutable = 'public, max-age=31536000, immutable'
    assert metadata.cache_control('app.js') == immutable
    assert metadata.cache_control('css/site.css') == immutable
    assert metadata.cache_control('logo.png') == immutable
    assert metadata.cache_control('fonts/a.woff') == immutable
    assert metadata.cache_control('index.html') == \
        'public, max-age=3600, must-revalidate'
    assert metadata.cache_control('v1/about/index.HTML') == \
        'public, max-age=3600, must-revalidate'
    assert metadata.cache_control('robots.txt') == 'public, max-age=86400'
    assert metadata.cache_control('feed.json') == 'public, max-age=86400'


def test_inference_is_stable_for_every_known_extension():
    for ext in metadata.CONTENT_TYPES:
        path = 'dir/file' + ext
        assert metadata.content_type(path) == metadata.content_type(path)
        assert metadata.cache_control(path) == metadata.cache_control(path)
        assert metadata.content_type(path) == metadata.CONTENT_TYPES[ext]


def test_windows_paths_use_basename_extension():
    assert metadata.content_type('assets\\app.js') == \
        'application/javascript'
