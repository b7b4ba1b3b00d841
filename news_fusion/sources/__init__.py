"""
Outlet extractors.

To add an outlet:
1. Subclass SelectorExtractor (or Extractor for non-selector pages)
2. Set name, label and the listing/body selectors
3. Register the class in factory._SOURCE_REGISTRY
"""

from .base import Extractor, SelectorExtractor
from .cnn import CnnExtractor
from .factory import available_sources, create_extractor, create_extractors
from .rt import RtExtractor

__all__ = [
    "Extractor",
    "SelectorExtractor",
    "CnnExtractor",
    "RtExtractor",
    "available_sources",
    "create_extractor",
    "create_extractors",
]
