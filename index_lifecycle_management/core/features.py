"""Feature privilege registry."""
import logging
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class FeaturePrivilege(BaseModel):
    """Cluster privileges required to use a feature."""
    model_config = ConfigDict(populate_by_name=True)

    required_cluster_privileges: List[str] = Field(alias="requiredClusterPrivileges")
    ui: List[str] = Field(default_factory=list)


class ElasticsearchFeature(BaseModel):
    """
    A feature gated on cluster privileges.

    Attributes:
        id: Unique feature identifier
        management: Management sections owned by the feature, keyed by app
        privileges: Privilege sets granting access to the feature
    """
    id: str
    management: Dict[str, List[str]] = Field(default_factory=dict)
    privileges: List[FeaturePrivilege]


class FeatureRegistry:
    """
    Holds features registered by plugins during setup.

    Usage:
        registry = FeatureRegistry()
        registry.register_elasticsearch_feature({
            "id": "index_lifecycle_management",
            "privileges": [{"requiredClusterPrivileges": ["manage_ilm"], "ui": []}],
        })
    """

    def __init__(self):
        self._features: Dict[str, ElasticsearchFeature] = {}

    def register_elasticsearch_feature(self, feature: ElasticsearchFeature | dict) -> None:
        """
        Register a feature.

        Args:
            feature: Feature model or its dict form

        Raises:
            ValueError: If a feature with the same id is already registered
        """
        if isinstance(feature, dict):
            feature = ElasticsearchFeature.model_validate(feature)

        if feature.id in self._features:
            raise ValueError(f"Feature '{feature.id}' is already registered")

        self._features[feature.id] = feature
        logger.debug(f"Registered feature {feature.id}")

    def get_elasticsearch_features(self) -> List[ElasticsearchFeature]:
        return list(self._features.values())
