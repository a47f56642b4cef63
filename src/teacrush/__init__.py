"""teacrush - size- and quality-targeted ffmpeg transcoding."""

__version__ = "0.1.0"
