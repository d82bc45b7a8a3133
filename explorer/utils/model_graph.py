"""
Model graph collection.

Finds every model an API declaration has to describe: the resource's own
model plus everything its operations accept or return, followed
transitively through the operations of those models.
"""

import logging
from collections import deque
from typing import Dict, Optional

from explorer.host import HostApplication, ModelRegistry
from explorer.models import ModelDescriptor

logger = logging.getLogger(__name__)


class ModelLookup:
    """Resolve model names against a host's attached models, then the global registry.

    Referenced models may be private or attached to no data source at all,
    so both tiers have to be consulted.
    """

    def __init__(self, local: ModelRegistry, fallback: Optional[ModelRegistry] = None):
        self.local = local
        self.fallback = fallback

    @classmethod
    def for_host(cls, host: HostApplication) -> "ModelLookup":
        return cls(host.models, host.registry)

    def resolve(self, name: str) -> Optional[ModelDescriptor]:
        model = self.local.get(name)
        if model is None and self.fallback is not None:
            model = self.fallback.get(name)
        return model


def collect_models(root: ModelDescriptor, lookup: ModelLookup) -> Dict[str, ModelDescriptor]:
    """Collect the transitive closure of models referenced from ``root``.

    Names that resolve to no model (primitives, unknown aliases) are skipped.

    Returns:
        Dict[str, ModelDescriptor]: Models keyed by name, ``root`` included
    """
    collected = {root.name: root}
    queue = deque([root])

    while queue:
        model = queue.popleft()
        for operation in model.operations:
            for type_name in operation.referenced_types():
                if type_name in collected:
                    continue
                referenced = lookup.resolve(type_name)
                if referenced is None:
                    continue
                collected[referenced.name] = referenced
                queue.append(referenced)

    logger.debug(f"Collected {len(collected)} models for {root.name}: {sorted(collected)}")
    return collected
