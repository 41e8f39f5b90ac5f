"""VidCube: demo video-sharing app with an in-memory view-model store."""

__version__ = "0.1.0"
