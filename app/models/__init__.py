from app.models.batch import BatchStatus
from app.models.track import Track
from app.models.uploaded_file import UploadedFile, FileType
from app.models.royalty_entry import RoyaltyEntry
from app.models.work import Work
from app.models.prs_statement import PrsStatement
from app.models.performance_royalty import PerformanceRoyalty
from app.models.track_integration import TrackIntegration

__all__ = [
    "BatchStatus",
    # Distributor statements
    "Track",
    "UploadedFile",
    "FileType",
    "RoyaltyEntry",
    # PRS statements
    "Work",
    "PrsStatement",
    "PerformanceRoyalty",
    # External matches
    "TrackIntegration",
]
