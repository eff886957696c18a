"""Promote Artifactory builds into Nexus staging repositories."""
