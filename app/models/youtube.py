from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict

# --- Internal Parsing Models (yt-dlp) ---

class YtDlpVideoInfo(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    timestamp: Optional[int] = None
    release_timestamp: Optional[int] = None
    upload_date: Optional[str] = None  # YYYYMMDD

    model_config = ConfigDict(extra='ignore')

    @property
    def published_at(self) -> Optional[datetime]:
        """Best available publish instant, most precise source first."""
        for epoch in (self.timestamp, self.release_timestamp):
            if epoch is not None:
                return datetime.fromtimestamp(epoch, tz=timezone.utc)
        if self.upload_date:
            try:
                return datetime.strptime(self.upload_date, "%Y%m%d").replace(tzinfo=timezone.utc)
            except ValueError:
                return None
        return None
