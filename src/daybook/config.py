"""Application settings.

Timing constants for the summary coordinator plus the model configuration.
Plain BaseModel: the CLI builds one from flags and environment.
"""

from pydantic import BaseModel, Field

from daybook.journal.store import DEFAULT_MAX_STORAGE_BYTES
from daybook.providers.config import ProviderConfig


class DaybookSettings(BaseModel):
    """Runtime settings for the journal and summary coordinator.

    - debounce_seconds: quiet period before an edit-triggered generation
    - stagger_seconds: delay between bulk warm-up starts, per project index
    - poll_interval_seconds / poll_timeout_seconds: consumer polling while
      another caller is generating
    """

    debounce_seconds: float = Field(default=0.5, ge=0)
    stagger_seconds: float = Field(default=0.2, ge=0)
    poll_interval_seconds: float = Field(default=0.5, gt=0)
    poll_timeout_seconds: float = Field(default=15.0, ge=0)
    max_storage_bytes: int = Field(default=DEFAULT_MAX_STORAGE_BYTES, gt=0)
    provider: ProviderConfig = ProviderConfig()
