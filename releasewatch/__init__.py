"""Release Watch: notify operators when the deployed version falls behind upstream."""

__version__ = "0.1.0"
