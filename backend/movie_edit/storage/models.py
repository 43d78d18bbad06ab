"""
Storage data models.
"""

from pydantic import BaseModel, ConfigDict


class UploadedAsset(BaseModel):
    """
    A file accepted into the storage directory.

    The id is generated by the service and never changes; file_path is
    derived from it once at store time.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    file_path: str
