"""Campus Telemetry: synthetic energy telemetry broadcast for campuses."""

try:
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("campus-telemetry")
except Exception:
    __version__ = "dev"
