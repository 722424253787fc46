from .enums import PayloadKind, CacheStatus, SummaryCacheType
from .summary import SummaryPayload, SummarizationRequest, CacheEntry
from .api import SummarizeRequest
