from s3deploy import static

__version__ = static.VERSION
__author__ = "s3deploy contributors"
__all__ = [
    "awsutils",
    "cli",
    "commands",
    "config",
    "deploy",
    "events",
    "exception",
    "invalidator",
    "logger",
    "metadata",
    "stackinspector",
    "static",
    "templates",
    "tests",
    "uploader",
    "utils",
]
