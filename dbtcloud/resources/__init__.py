from dbtcloud.resources.repository import (
    ID_DELIMITER,
    LOCAL_ONLY_FIELDS,
    RepositoryResource,
    make_id,
    merge_remote,
    split_id,
)
from dbtcloud.resources.schemas import RepositoryConfig, RepositoryData

__all__ = [
    "ID_DELIMITER",
    "LOCAL_ONLY_FIELDS",
    "RepositoryConfig",
    "RepositoryData",
    "RepositoryResource",
    "make_id",
    "merge_remote",
    "split_id",
]
