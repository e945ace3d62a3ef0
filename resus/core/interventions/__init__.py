"""
Intervention Layer

Treatment bundles per diagnosis and the recommender that selects them.
"""
from .base import Benefit, Dosing, Intervention, RequiredTest, Risk, TestPriority, Tier, TimeWindow
from .bundles import BUNDLES, Bundle, bundle, get_bundle_builder
from .recommender import Recommendation, recommend

__all__ = [
    "Benefit",
    "Dosing",
    "Intervention",
    "RequiredTest",
    "Risk",
    "TestPriority",
    "Tier",
    "TimeWindow",
    "BUNDLES",
    "Bundle",
    "bundle",
    "get_bundle_builder",
    "Recommendation",
    "recommend",
]
