from .nexus_client import NexusStagingClient
from .orchestrator import StagingOrchestrator, StagingState

__all__ = ["NexusStagingClient", "StagingOrchestrator", "StagingState"]
