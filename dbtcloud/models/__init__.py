from dbtcloud.models.repository import DeployKey, Repository, State

__all__ = [
    "DeployKey",
    "Repository",
    "State",
]
