from .artifactory_client import ArtifactoryClient
from .downloader import BuildDownloader

__all__ = ["ArtifactoryClient", "BuildDownloader"]
